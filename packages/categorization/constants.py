"""Category constants for transaction classification.

This module defines the spending categories the statement engine assigns to
extracted transactions, and the keyword table the rule-based classifier walks.
The set is closed for the static rules but open to learning: user corrections
and custom patterns may introduce any category string.
"""

from enum import Enum


class Category(str, Enum):
    """Standard spending categories, in rule-evaluation order."""

    FOOD = "Food"
    GROCERIES = "Groceries"
    UTILITIES = "Utilities"
    RENT = "Rent"
    ENTERTAINMENT = "Entertainment"
    TRANSPORT = "Transport"
    SHOPPING = "Shopping"
    HOUSEHOLD = "Household"
    HEALTH = "Health"
    EDUCATION = "Education"
    TRANSFER = "Transfer"
    SUBSCRIPTION = "Subscription"
    OTHER = "Other"


FALLBACK_CATEGORY = Category.OTHER.value

# Keywords are lowercase substrings of the raw description.
# Iteration order is significant: the first category with a hit wins.
DEFAULT_CATEGORY_KEYWORDS: dict[str, list[str]] = {
    Category.FOOD.value: [
        "swiggy", "zomato", "food", "restaurant", "cafe", "pizza", "dominos", "mcdonalds", "kfc",
        "burger", "dining", "eat", "uber eats", "dunzo", "faasos", "behrouz", "box8", "eatfit",
        "biryani", "subway", "starbucks", "chaayos", "haldiram", "barbeque", "dhabha", "mess",
        "canteen", "tiffin", "meal", "lunch", "dinner", "breakfast", "thali",
    ],
    Category.GROCERIES.value: [
        "grocery", "groceries", "bigbasket", "blinkit", "zepto", "dmart", "reliance fresh",
        "more", "supermarket", "vegetables", "fruits", "instamart", "jiomart", "spencers",
        "spar", "fresh", "mart", "kirana", "daily needs", "provisions", "staples", "milk",
        "dairy", "bread", "eggs", "atta", "rice", "dal", "oil",
    ],
    Category.UTILITIES.value: [
        "electricity", "electric", "power", "water", "gas", "wifi", "internet", "broadband",
        "airtel", "jio", "bsnl", "bill", "tata power", "bescom", "torrent", "adani",
        "mahanagar", "vodafone", "vi", "postpaid", "prepaid", "recharge", "dth", "tatasky",
        "dish tv", "airtel xstream", "pipeline", "cylinder", "lpg", "indane", "hp gas",
    ],
    Category.RENT.value: [
        "rent", "housing", "landlord", "flat", "apartment", "society", "maintenance",
        "pg", "paying guest", "hostel", "room rent", "house rent", "accommodation",
        "lease", "deposit", "brokerage",
    ],
    Category.ENTERTAINMENT.value: [
        "netflix", "prime", "hotstar", "spotify", "movie", "cinema", "pvr", "inox",
        "gaming", "game", "xbox", "playstation", "youtube", "apple music", "gaana",
        "jio saavn", "zee5", "sony liv", "mx player", "voot", "alt balaji", "disney",
        "bookmyshow", "paytm movies", "concert", "event", "show", "play", "theatre",
    ],
    Category.TRANSPORT.value: [
        "uber", "ola", "rapido", "metro", "petrol", "diesel", "fuel", "parking", "toll",
        "cab", "taxi", "irctc", "railways", "bus", "redbus", "abhibus", "auto", "rickshaw",
        "fastag", "dmrc", "namma metro", "bmtc", "best", "bike", "yulu", "bounce", "vogo",
        "servicing", "car wash", "ev charging", "indigo", "spicejet", "air india", "flight",
    ],
    Category.SHOPPING.value: [
        "amazon", "flipkart", "myntra", "ajio", "nykaa", "shopping", "mall", "clothes",
        "fashion", "meesho", "tata cliq", "snapdeal", "firstcry", "lenskart", "bewakoof",
        "zara", "h&m", "lifestyle", "pantaloons", "westside", "max", "shoppers stop",
        "central", "brand factory", "decathlon", "croma", "reliance digital", "vijay sales",
    ],
    Category.HOUSEHOLD.value: [
        "cleaning", "repair", "maintenance", "pest", "plumber", "electrician", "furniture",
        "urban company", "housejoy", "pepperfry", "ikea", "hometown", "nilkamal", "godrej",
        "appliance", "ac service", "washing machine", "fridge", "carpenter", "painter",
        "mason", "civil", "renovation", "interior", "curtains", "mattress", "bedding",
    ],
    Category.HEALTH.value: [
        "pharmacy", "medical", "hospital", "doctor", "clinic", "apollo", "pharmeasy",
        "netmeds", "medicine", "1mg", "tata health", "medlife", "practo", "cult", "gym",
        "fitness", "yoga", "healthify", "lab test", "diagnostic", "pathology", "dental",
        "eye care", "optician", "insurance", "health insurance", "mediclaim",
    ],
    Category.EDUCATION.value: [
        "udemy", "coursera", "skillshare", "linkedin learning", "unacademy", "byjus",
        "vedantu", "whitehat", "coding", "course", "training", "certification", "exam",
        "fee", "tuition", "books", "stationery", "library", "upgrad", "great learning",
    ],
    Category.TRANSFER.value: [
        "transfer", "neft", "imps", "rtgs", "upi", "self transfer", "own account",
        "fund transfer", "to self", "savings", "fd", "fixed deposit", "mutual fund",
        "investment", "sip", "zerodha", "groww", "upstox", "paytm money",
    ],
    Category.SUBSCRIPTION.value: [
        "subscription", "membership", "premium", "annual", "monthly", "renewal",
        "auto debit", "recurring", "emi", "installment", "credit card", "cc payment",
    ],
}
