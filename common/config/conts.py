CATEGORY_ENTITY = "category"
PRODUCT_ENTITY = "product"
ORDER_ENTITY = "order"
ORDER_ITEM_ENTITY = "order_item"
USER_ENTITY = "user"

DEFAULT_ORDER_STATUS = "Pending"

UPLOADS_URL_PATH = "public/uploads"

# Accepted image mime types and the extension they are stored with
FILE_TYPE_MAP = {
    "image/png": "png",
    "image/jpg": "jpg",
    "image/jpeg": "jpeg",
}
