# inventory/constants.py

PRODUCT_TYPES = (
    "Lehenga Fabric",
    "Silk Thread",
    "Cotton Fabric",
    "Men's Kurta Fabric",
    "Blouse Lace",
    "Embroidery Thread",
    "Zari Border",
    "Dupatta Fabric",
    "Lining Fabric",
    "Buttons",
    "Zippers",
    "Elastic",
    "Hooks & Eyes",
    "Beads",
    "Sequins",
    "Mirror Work",
    "Other",
)

CATEGORIES = (
    "Fabrics",
    "Threads",
    "Accessories",
    "Embellishments",
    "Hardware",
    "Tools",
    "Other",
)

UNITS = ("pieces", "meters", "yards", "rolls", "spools", "packets", "kg", "grams")

DEFAULT_MIN_STOCK = 10
