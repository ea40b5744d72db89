from enum import Enum


class Role(str, Enum):
    ADMIN = "admin"
    HOST = "host"
    USER = "user"


class ListingStatus(str, Enum):
    DRAFT = "draft"
    PUBLISHED = "published"


class PropertyCategory(str, Enum):
    HOUSE = "house"
    APARTMENT = "apartment"
    BARN = "barn"
    BED_AND_BREAKFAST = "bed_and_breakfast"
    BOAT = "boat"
    CABIN = "cabin"
    CAMPER = "camper"
    CASA_PARTICULAR = "casa_particular"
    CASTLE = "castle"
    CAVE = "cave"
    CONTAINER = "container"
    CYCLADIC_HOME = "cycladic_home"
    DAMMUSO = "dammuso"
    DOME = "dome"
    EARTH_HOME = "earth_home"
    FARM = "farm"
    GUESTHOUSE = "guesthouse"
    HOTEL = "hotel"
    HOUSEBOAT = "houseboat"
    KEZHAN = "kezhan"
    MINSU = "minsu"
    RIAD = "riad"
    RYOKAN = "ryokan"
    SHEPHERDS_HUT = "shepherds_hut"
    TENT = "tent"
    TINY_HOME = "tiny_home"
    TOWER = "tower"
    TREEHOUSE = "treehouse"
    TRULLO = "trullo"
    WINDMILL = "windmill"
    YURT = "yurt"


class PlaceType(str, Enum):
    ENTIRE_PLACE = "entire_place"
    ROOM = "room"
    SHARED_ROOM = "shared_room"


class BathroomUsage(str, Enum):
    ME_ONLY = "me_only"
    MY_FAMILY = "my_family"
    OTHER_GUESTS = "other_guests"
    OTHER_PEOPLE = "other_people"


class FavoriteAmenity(str, Enum):
    WIFI = "wifi"
    TV = "tv"
    KITCHEN = "kitchen"
    WASHER = "washer"
    FREE_PARKING = "free_parking"
    PAID_PARKING = "paid_parking"
    AIR_CONDITIONING = "air_conditioning"
    DEDICATED_WORKSPACE = "dedicated_workspace"


class Amenity(str, Enum):
    POOL = "pool"
    HOT_TUB = "hot_tub"
    PATIO = "patio"
    BBQ_GRILL = "bbq_grill"
    OUTDOOR_DINING_AREA = "outdoor_dining_area"
    FIRE_PIT = "fire_pit"
    POOL_TABLE = "pool_table"
    INDOOR_FIREPLACE = "indoor_fireplace"
    PIANO = "piano"
    EXERCISE_EQUIPMENT = "exercise_equipment"
    LAKE_ACCESS = "lake_access"
    BEACH_ACCESS = "beach_access"
    SKI_IN_OUT = "ski_in_out"
    OUTDOOR_SHOWER = "outdoor_shower"


class SafetyItem(str, Enum):
    SMOKE_ALARM = "smoke_alarm"
    FIRST_AID = "first_aid"
    FIRE_EXTINGUISHER = "fire_extinguisher"
    CARBON_MONOXIDE_ALARM = "carbon_monoxide_alarm"


class Highlight(str, Enum):
    PEACEFUL = "peaceful"
    UNIQUE = "unique"
    FAMILY_FRIENDLY = "family_friendly"
    STYLISH = "stylish"
    CENTRAL = "central"
    SPACIOUS = "spacious"
    CHARMING = "charming"


class BookingSetting(str, Enum):
    APPROVE_BEFORE_BOOKING = "approve_before_booking"
    INSTANT_BOOK = "instant_book"
