# backend/seed.py
"""Initial catalog and UI strings, written only when the store is empty."""
import logging

from sqlalchemy.orm import Session

from .crud import upsert_translation
from .models import Artisan, Product, Translation

log = logging.getLogger(__name__)

ARTISANS = [
    {
        "key": "artisan-1",
        "name": "Priya Sharma",
        "name_hi": "प्रिया शर्मा",
        "bio": "Priya is a third-generation block-printer from Jaipur, a city renowned for its vibrant textiles. She finds inspiration in the intricate patterns of Rajasthani architecture and nature.",
        "bio_hi": "प्रिया जयपुर की तीसरी पीढ़ी की ब्लॉक-प्रिंटर हैं। उन्हें राजस्थानी वास्तुकला और प्रकृति के जटिल पैटर्न से प्रेरणा मिलती है।",
        "craft": "Block-Printing",
        "craft_hi": "ब्लॉक-प्रिंटिंग",
        "location": "Jaipur, Rajasthan",
        "location_hi": "जयपुर, राजस्थान",
        "profile_image": "https://placehold.co/100x100.png",
    },
    {
        "key": "artisan-2",
        "name": "Rohan Mehra",
        "name_hi": "रोहन मेहरा",
        "bio": "From his workshop in Saharanpur, Rohan Mehra practices the art of wood carving, a skill passed down through generations. He specializes in intricate home goods from Sheesham wood.",
        "bio_hi": "सहारनपुर की अपनी कार्यशाला में रोहन मेहरा पीढ़ियों से चली आ रही लकड़ी की नक्काशी की कला का अभ्यास करते हैं।",
        "craft": "Wood Carving",
        "craft_hi": "लकड़ी की नक्काशी",
        "location": "Saharanpur, Uttar Pradesh",
        "location_hi": "सहारनपुर, उत्तर प्रदेश",
        "profile_image": "https://placehold.co/100x100.png",
    },
    {
        "key": "artisan-3",
        "name": "Aisha Begum",
        "name_hi": "आयशा बेगम",
        "bio": "Aisha is a master of Chikankari embroidery from Lucknow. Her delicate and precise needlework brings traditional Mughal-era designs to life on fine fabrics.",
        "bio_hi": "आयशा लखनऊ की चिकनकारी कढ़ाई की उस्ताद हैं। उनकी नाज़ुक सुईकारी मुग़ल-कालीन डिज़ाइनों को जीवंत करती है।",
        "craft": "Embroidery",
        "craft_hi": "कढ़ाई",
        "location": "Lucknow, Uttar Pradesh",
        "location_hi": "लखनऊ, उत्तर प्रदेश",
        "profile_image": "https://placehold.co/100x100.png",
    },
]

PRODUCTS = [
    {
        "artisan": "artisan-1",
        "name": "Hand-Blocked Table Runner",
        "name_hi": "हाथ से छपा टेबल रनर",
        "description": "A beautifully handcrafted table runner with a classic floral motif in indigo and white.",
        "description_hi": "नील और सफ़ेद रंग में पारंपरिक फूलों की छपाई वाला हस्तनिर्मित टेबल रनर।",
        "price": 2500.0,
        "category": "Block-Printing",
        "category_hi": "ब्लॉक-प्रिंटिंग",
        "stock": 15,
        "materials": ["Cotton Canvas", "Natural Dyes"],
        "materials_hi": ["सूती कैनवास", "प्राकृतिक रंग"],
    },
    {
        "artisan": "artisan-2",
        "name": "Sheesham Wood Spice Box",
        "name_hi": "शीशम की लकड़ी का मसाला डिब्बा",
        "description": "An intricately carved masala dabba made from durable Sheesham wood, with a small spoon for your essential spices.",
        "description_hi": "टिकाऊ शीशम की लकड़ी से बना नक्काशीदार मसाला डिब्बा।",
        "price": 3200.0,
        "category": "Wood Carving",
        "category_hi": "लकड़ी की नक्काशी",
        "stock": 8,
        "materials": ["Sheesham (Indian Rosewood)", "Brass Inlay"],
        "materials_hi": ["शीशम", "पीतल की जड़ाई"],
    },
    {
        "artisan": "artisan-3",
        "name": "Chikankari Cotton Kurta",
        "name_hi": "चिकनकारी सूती कुर्ता",
        "description": "A luxuriously soft cotton kurta featuring delicate Chikankari embroidery in timeless floral patterns.",
        "description_hi": "नाज़ुक चिकनकारी कढ़ाई वाला मुलायम सूती कुर्ता।",
        "price": 4500.0,
        "category": "Embroidery",
        "category_hi": "कढ़ाई",
        "stock": 5,
        "materials": ["Mulmul Cotton", "Cotton Thread"],
        "materials_hi": ["मलमल सूती", "सूती धागा"],
    },
    {
        "artisan": "artisan-1",
        "name": "Jaipuri Blue Pottery Vase",
        "name_hi": "जयपुरी ब्लू पॉटरी फूलदान",
        "description": "A classic blue pottery vase from Jaipur with a traditional peacock design, made from quartz stone powder and glass.",
        "description_hi": "पारंपरिक मोर डिज़ाइन वाला जयपुर का ब्लू पॉटरी फूलदान।",
        "price": 3500.0,
        "category": "Pottery",
        "category_hi": "मिट्टी के बर्तन",
        "stock": 10,
        "materials": ["Quartz Powder", "Lead-free Glaze"],
        "materials_hi": ["क्वार्ट्ज़ पाउडर", "सीसा-रहित ग्लेज़"],
    },
    {
        "artisan": "artisan-2",
        "name": "Wooden Jharokha Wall Decor",
        "name_hi": "लकड़ी का झरोखा दीवार सजावट",
        "description": "A miniature, intricately carved jharokha that brings a piece of Rajasthani palaces to your wall.",
        "description_hi": "राजस्थानी महलों की झलक देने वाला बारीक नक्काशीदार लघु झरोखा।",
        "price": 7500.0,
        "category": "Wood Carving",
        "category_hi": "लकड़ी की नक्काशी",
        "stock": 7,
        "materials": ["Mango Wood", "Natural Varnish"],
        "materials_hi": ["आम की लकड़ी", "प्राकृतिक वार्निश"],
    },
]

TRANSLATIONS = {
    "en": {
        "common": {"loading": "Loading content...", "search": "Search", "by": "by", "save": "Save Product"},
        "nav": {"home": "Home", "products": "Products", "artisans": "Artisans", "shoppingCart": "Shopping Cart",
                "artisanDashboard": "Artisan Dashboard"},
        "cart": {"empty": "Your Cart is Empty", "checkout": "Checkout", "total": "Total",
                 "notEnoughStock": "Only {stock} left in stock.", "added": "{name} added to cart."},
        "checkout": {"placed": "Order Placed! Thank you for your purchase."},
    },
    "hi": {
        "common": {"loading": "सामग्री लोड हो रही है...", "search": "खोजें", "by": "द्वारा", "save": "उत्पाद सहेजें"},
        "nav": {"home": "होम", "products": "उत्पाद", "artisans": "कारीगर", "shoppingCart": "शॉपिंग कार्ट",
                "artisanDashboard": "कारीगर डैशबोर्ड"},
        "cart": {"empty": "आपका कार्ट खाली है", "checkout": "चेकआउट", "total": "कुल",
                 "notEnoughStock": "स्टॉक में केवल {stock} बचे हैं।", "added": "{name} कार्ट में जोड़ा गया।"},
        "checkout": {"placed": "ऑर्डर हो गया! आपकी खरीदारी के लिए धन्यवाद।"},
    },
}


def seed_database(db: Session) -> bool:
    """Populate artisans, products and UI strings if the store is empty."""
    seeded = False
    if not db.query(Translation).first():
        for lang, data in TRANSLATIONS.items():
            upsert_translation(db, lang, data)
        seeded = True

    if db.query(Product).first() or db.query(Artisan).first():
        log.info("Database already contains catalog data. Seeding not required.")
        return seeded

    ids = {}
    for entry in ARTISANS:
        data = {k: v for k, v in entry.items() if k != "key"}
        artisan = Artisan(**data)
        db.add(artisan)
        db.flush()
        ids[entry["key"]] = artisan.id

    for entry in PRODUCTS:
        data = {k: v for k, v in entry.items() if k != "artisan"}
        db.add(Product(artisan_id=ids[entry["artisan"]], images=["https://placehold.co/600x600.png"], **data))

    db.commit()
    log.info("Seeded %d artisans and %d products", len(ARTISANS), len(PRODUCTS))
    return True
