# --- Display ---
WIDTH = 400
HEIGHT = 600
FPS = 60

# --- Player / Physics (per tick, no dt) ---
GRAVITY = 0.7
JUMP_VY = -13.4
PLAYER_SPEED = 3.2
PLAYER_W = 30
PLAYER_H = 30
SPIN_SPEED = 0.12           # radians per tick while airborne and moving

# --- Platforms ---
PLATFORM_HEIGHT = 14
BASE_PLATFORM_HEIGHT = 10
PLATFORM_GAP_Y = 80         # vertical spacing between generated platforms
INITIAL_PLATFORMS = 7       # generated on top of the base platform
SPAWN_MARGIN_Y = 50         # spawn when the topmost platform is below this y
CULL_MARGIN_Y = 50          # remove once y >= HEIGHT + margin
SPAWN_MIN_SPAN_X = 10       # lower bound of the random x range
MOVING_PLATFORM_CHANCE = 0.3
SCROLL_START_SCORE = 3      # world scrolls once score > this

# --- Difficulty ramps ---
SCROLL_RAMP_START = 10
SCROLL_BASE_SPEED = 0.7
SCROLL_LOG_ACCEL = 0.2
SCROLL_MAX_SPEED = 2.1
SCROLL_SMOOTHING = 0.12

PLATFORM_RAMP_START = 100
PLATFORM_DIFFICULTY_INTERVAL = 10
PLATFORM_BASE_SPEED = 0.8
PLATFORM_MAX_SPEED = 2.0
PLATFORM_LOG_ACCEL = 0.45
PLATFORM_SPEED_SMOOTHING = 0.10

PLATFORM_BASE_WIDTH = 110
PLATFORM_MIN_WIDTH = 62
PLATFORM_WIDTH_LOG_FACTOR = 8
PLATFORM_WIDTH_SMOOTHING = 0.08

# --- Pixel art ---
PIXEL_GRID = 20
PIXEL_SLOTS = 5
BRUSH_MIN_SIZE = 1
BRUSH_MAX_SIZE = 5
EXPORT_APP = "tower-jumper"
EXPORT_KIND = "pixel-art"
EXPORT_VERSION = 1

# --- High scores ---
HIGH_SCORE_LIMIT = 10
DEFAULT_PLAYER_NAME = "Anon"

# --- Audio ---
DEFAULT_MUSIC_VOLUME = 0.5
DEFAULT_SFX_VOLUME = 1.0
VOLUME_STEP = 0.1             # per -/= or ,/. key press
CLICK_VOLUME = 1.0
LAND_VOLUME = 1.0

# --- Colors ---
DEFAULT_COLOR = "#1E90FF"
COLOR_CHOICES = ("#1E90FF", "#FF4136", "#2ECC40", "#FFDC00", "#B10DC9", "#FF851B")
EDITOR_PALETTE_COLORS = (
    "#000000", "#FFFFFF", "#444444", "#BDBDBD", "#9B1B30", "#8B4513",
    "#E53935", "#FFB3BA", "#FF9800", "#D7A97B", "#F4C430", "#FFEB3B",
    "#FFF59D", "#B2FF59", "#C8E6C9", "#43A047", "#00BCD4", "#B3E5FC",
    "#448AFF", "#7986CB", "#283593", "#546E7A", "#7E57C2", "#B39DDB",
)
PLATFORM_COLORS = (
    "#32CD32", "#4FC3F7", "#FFB74D", "#BA68C8", "#E57373", "#81C784", "#FFD54F",
)
PLATFORM_COLOR_BAND = 100   # platforms per color band
PLATFORM_LABEL_EVERY = 10
LABEL_COLOR = (255, 255, 255)
SHADOW_OFFSET = (0, 6)

# --- Storage keys ---
MUSIC_VOLUME_KEY = "towerJumperMusicVolume"
MUSIC_MUTED_KEY = "towerJumperMusicMuted"
SFX_VOLUME_KEY = "towerJumperSfxVolume"
SFX_MUTED_KEY = "towerJumperSfxMuted"
HS_KEY = "towerJumperHighScores"
NAME_KEY = "towerJumperPlayerName"
COLOR_KEY = "towerJumperColor"
RENDER_MODE_KEY = "towerJumperRenderMode"
PIXEL_ART_KEY = "towerJumperPixelArt"      # legacy single grid; slots append _<n>
PIXEL_SLOT_KEY = "towerJumperPixelSlot"
BRUSH_COLOR_KEY = "towerJumperBrushColor"
BRUSH_SIZE_KEY = "towerJumperBrushSize"
BRUSH_SHAPE_KEY = "towerJumperBrushShape"
THEME_KEY = "towerJumperTheme"

# --- Files ---
SAVE_ENV_VAR = "TOWER_JUMPER_SAVE"
DEFAULT_SAVE_FILE = "~/.tower_jumper/save.json"
ASSETS_DIR_NAME = "assets"
MUSIC_FILE = "TowerTheme.wav"
CLICK_FILE = "click.wav"
LAND_FILE = "land.wav"
