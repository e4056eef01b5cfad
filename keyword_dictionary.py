"""
Centralized storage for the Korean to English keyword map and the
category markers used when no dictionary entry matches.
Separating the data from the translator makes it easy to extend
without touching the lookup logic.

Order matters: the substring scan returns the first key (in insertion
order) contained in a token.
"""

# -----------------------------------------------------------------------------
# KEYWORD MAP (Korean phrase -> English search terms)
# -----------------------------------------------------------------------------

KEYWORD_MAP = {
    # Food & Restaurant
    "버거": "burger",
    "피자": "pizza",
    "치킨": "chicken",
    "커피": "coffee",
    "카페": "cafe",
    "음식": "food",
    "맛있는": "delicious",
    "레스토랑": "restaurant",
    "음료": "beverage drink",
    "디저트": "dessert",
    "케이크": "cake",
    "빵": "bread bakery",
    "비건": "vegan",
    "샐러드": "salad",
    "스테이크": "steak",
    "파스타": "pasta",
    "초밥": "sushi",
    "라면": "ramen noodle",

    # Shopping & Sale
    "할인": "sale discount",
    "세일": "sale",
    "쇼핑": "shopping",
    "패션": "fashion",
    "옷": "clothing clothes",
    "신발": "shoes",
    "가방": "bag handbag",
    "화장품": "cosmetics beauty",
    "뷰티": "beauty",
    "선물": "gift present",
    "이벤트": "event",
    "무료": "free",
    "배송": "delivery shipping",
    "신상품": "new product",
    "한정": "limited edition",

    # Tech & Digital
    "스마트폰": "smartphone mobile",
    "컴퓨터": "computer laptop",
    "노트북": "laptop notebook",
    "전자제품": "electronics",
    "게임": "gaming game",
    "앱": "app application",
    "소프트웨어": "software",
    "기술": "technology tech",
    "AI": "artificial intelligence AI",

    # Business & Service
    "비즈니스": "business",
    "회사": "company corporate",
    "서비스": "service",
    "상담": "consultation consulting",
    "교육": "education training",
    "강의": "lecture course",
    "스타트업": "startup",
    "투자": "investment",
    "금융": "finance",
    "부동산": "real estate",
    "보험": "insurance",

    # Health & Fitness
    "건강": "health healthy",
    "운동": "fitness exercise",
    "헬스": "gym fitness",
    "요가": "yoga",
    "다이어트": "diet weight loss",
    "피트니스": "fitness",
    "스포츠": "sports",

    # Travel & Leisure
    "여행": "travel",
    "호텔": "hotel",
    "휴가": "vacation holiday",
    "관광": "tourism",
    "항공": "airline flight",

    # Descriptive terms
    "최고": "best",
    "프리미엄": "premium",
    "럭셔리": "luxury",
    "특별한": "special",
    "새로운": "new",
    "인기": "popular",
    "추천": "recommend",
    "오늘": "today",
    "내일": "tomorrow",
    "주말": "weekend",
    "여름": "summer",
    "겨울": "winter",
    "봄": "spring",
    "가을": "autumn fall",
}

# -----------------------------------------------------------------------------
# CATEGORY HEURISTICS (checked in this order against the whole text)
# -----------------------------------------------------------------------------

CATEGORY_HEURISTICS = (
    # Discount / sale, including a literal percent sign ("50%")
    (("할인", "세일", "%"), ("sale", "promotion", "discount", "shopping")),
    # Food
    (("음식", "맛"), ("food", "restaurant", "delicious")),
    # Novelty
    (("신상", "새로운"), ("new", "product", "launch")),
)

GENERIC_FALLBACK_TERMS = ("promotion", "marketing", "business")
