PLANT_TOMATO = "Tomato"
PLANT_BASIL = "Basil"
PLANT_LETTUCE = "Lettuce"
PLANT_CARROT = "Carrot"
PLANT_STRAWBERRY = "Strawberry"
PLANT_EMPTY = "Empty"

PLANT_TYPES = (PLANT_TOMATO, PLANT_BASIL, PLANT_LETTUCE, PLANT_CARROT, PLANT_STRAWBERRY, PLANT_EMPTY)

WEATHER_SUNNY = "Sunny"
WEATHER_RAINY = "Rainy"
WEATHER_CLOUDY = "Cloudy"
WEATHER_HEATWAVE = "Heatwave"

WEATHER_TYPES = (WEATHER_SUNNY, WEATHER_RAINY, WEATHER_CLOUDY, WEATHER_HEATWAVE)

# Used when no daily event arrives. Sunny is listed twice and carries double weight.
FALLBACK_WEATHER_CYCLE = (WEATHER_SUNNY, WEATHER_CLOUDY, WEATHER_RAINY, WEATHER_SUNNY, WEATHER_HEATWAVE)

LOG_INFO = "info"
LOG_WARNING = "warning"
LOG_SUCCESS = "success"
LOG_EVENT = "event"

EFFECT_WATER = "water"
EFFECT_MONEY = "money"
EFFECT_HEALTH = "health"
EFFECT_GROWTH = "growth"
EFFECT_NONE = "none"

EFFECT_TYPES = (EFFECT_WATER, EFFECT_MONEY, EFFECT_HEALTH, EFFECT_GROWTH, EFFECT_NONE)

GRID_SIZE = 9
INITIAL_MONEY = 100
INITIAL_WATER = 200
INITIAL_WEATHER = WEATHER_SUNNY

WATER_REFILL_COST = 5
WATER_REFILL_AMOUNT = 50
WATER_ACTION_COST = 20
WATER_ACTION_AMOUNT = 40
PLANTING_WATER_LEVEL = 50.0

HEATWAVE_WATER_MULTIPLIER = 1.5
RAINY_WATER_MULTIPLIER = 0.1
RAIN_REPLENISHMENT = 30.0
DROUGHT_DAMAGE = 20.0
OVERWATER_THRESHOLD = 90.0
OVERWATER_DAMAGE = 5.0
GROWTH_HEALTH_THRESHOLD = 50.0
THRIVING_HEALTH_THRESHOLD = 90.0
THRIVING_GROWTH_BONUS = 1.2

WELCOME_MESSAGE = "Welcome to Urban Sprout! Start by planting seeds."

ACTION_PLANTING = "planting"
ACTION_NEW_DAY = "new_day"

PENDING_ACTION_TITLES = {
    ACTION_PLANTING: "🌱 Seeds Being Planted",
    ACTION_NEW_DAY: "🌅 A New Day Is Dawning",
}

DEFAULT_PLANT_DATA = {
    PLANT_TOMATO: {
        "days_to_maturity": 10, "water_needs": 15, "value": 50, "cost": 15,
        "description": "Requires consistent watering and support. High yield value.",
    },
    PLANT_BASIL: {
        "days_to_maturity": 5, "water_needs": 10, "value": 25, "cost": 5,
        "description": "Fast growing herb. Great for beginners.",
    },
    PLANT_LETTUCE: {
        "days_to_maturity": 6, "water_needs": 20, "value": 30, "cost": 8,
        "description": "Needs plenty of water but grows quickly.",
    },
    PLANT_CARROT: {
        "days_to_maturity": 12, "water_needs": 10, "value": 45, "cost": 12,
        "description": "Root vegetable. Low maintenance but slow.",
    },
    PLANT_STRAWBERRY: {
        "days_to_maturity": 15, "water_needs": 25, "value": 80, "cost": 30,
        "description": "High value fruit. Sensitive to water changes.",
    },
}
