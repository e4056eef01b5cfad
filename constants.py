"""
Shared constants for the promo image generator.
Keeps search parameters, placeholder URLs and download names centralized.
"""

# Unsplash search
UNSPLASH_SEARCH_URL = "https://api.unsplash.com/search/photos"
SEARCH_PER_PAGE = 10
SEARCH_MAX_RANDOM_PAGE = 3
SEARCH_ORDER_OPTIONS = ("relevant", "latest", "popular")

# Broader query used once when the keyword search comes back empty
FALLBACK_SEARCH_QUERY = "modern business promotion marketing professional"
FALLBACK_SEARCH_PER_PAGE = 3

# Placeholder images
PLACEHOLDER_BASE_URL = "https://via.placeholder.com/1920x1080.png"
PLACEHOLDER_NO_API_KEY = f"{PLACEHOLDER_BASE_URL}?text=No+API+Key"
PLACEHOLDER_NO_IMAGE_FOUND = f"{PLACEHOLDER_BASE_URL}?text=No+Image+Found"
PLACEHOLDER_ERROR_LOADING = f"{PLACEHOLDER_BASE_URL}?text=Error+Loading+Image"

# Download names
COMPOSITED_FILENAME = "promo-image-with-text.png"
BACKGROUND_FILENAME = "promo-image-background.png"
PNG_MEDIA_TYPE = "image/png"

# Shown when the caption could not be drawn and only the background is delivered
EXPORT_FALLBACK_NOTICE = "텍스트를 이미지에 추가하는데 실패했습니다. 배경 이미지만 다운로드합니다."

# Caption style
CAPTION_FONT_DIVISOR = 15
CAPTION_MAX_WIDTH_RATIO = 0.9
CAPTION_LINE_HEIGHT_RATIO = 1.2
CAPTION_FILL = (255, 255, 255, 255)
SHADOW_COLOR = (0, 0, 0, int(255 * 0.7))
SHADOW_BLUR = 8
SHADOW_OFFSET = (2, 2)

# Bold fonts with Hangul coverage first, then Latin-only bold fonts
CAPTION_FONT_CANDIDATES = (
    "/usr/share/fonts/opentype/noto/NotoSansCJK-Bold.ttc",
    "/usr/share/fonts/noto-cjk/NotoSansCJK-Bold.ttc",
    "/usr/share/fonts/truetype/nanum/NanumGothicBold.ttf",
    "/System/Library/Fonts/AppleSDGothicNeo.ttc",
    "C:\\Windows\\Fonts\\malgunbd.ttf",
    "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf",
    "/usr/share/fonts/TTF/DejaVuSans-Bold.ttf",
)

# Outbound HTTP
USER_AGENT = "PromoImageGenerator/1.0"

# Remote image downloads: https only, bounded size
ALLOWED_IMAGE_SCHEMES = ("https",)
MAX_IMAGE_BYTES = 20 * 1024 * 1024
IMAGE_DOWNLOAD_CHUNK_SIZE = 64 * 1024

# Undecodable background bytes are passed through with an unknown type
FALLBACK_MEDIA_TYPE = "application/octet-stream"

# In-memory UI sessions
MAX_SESSIONS = 10_000
SESSION_IDLE_TTL_SECONDS = 6 * 60 * 60
