"""
The 24 sekki (solar terms): seasonal context shown alongside a day.

Each term starts on a fixed approximate month/day and lasts until the next
one begins. The table is in solar-year order, from Risshun (Feb 4) to Daikan
(Jan 20); Toji covers the turn of the calendar year.
"""
from datetime import date
from enum import Enum
from typing import List, NamedTuple, Tuple


class Season(str, Enum):
    SPRING = "spring"
    SUMMER = "summer"
    AUTUMN = "autumn"
    WINTER = "winter"


class Sekki(NamedTuple):
    id: str
    kanji: str
    romaji: str
    english: str
    start_month: int  # 1-12
    start_day: int
    description: str
    context: str
    reflection: str
    wisdom: str
    season: Season

    @property
    def start(self) -> Tuple[int, int]:
        return self.start_month, self.start_day


SEKKI_DATA: List[Sekki] = [
    # Spring
    Sekki(
        "risshun", "立春", "Risshun", "Beginning of Spring", 2, 4,
        "Spring begins. The east wind melts the ice.",
        "The first of the 24 sekki marks the astronomical start of spring. Though often still cold, "
        "ancient farmers watched for subtle signs: plum blossoms starting to bloom, the lengthening "
        "days bringing new energy.",
        "What new beginning is stirring within you?",
        "A season for Create and Focus: plant seeds for the year ahead",
        Season.SPRING,
    ),
    Sekki(
        "usui", "雨水", "Usui", "Rain Water", 2, 19,
        "Snow turns to rain. The earth awakens with moisture.",
        "As temperatures rise, precipitation shifts from snow to rain. The name literally means "
        "'rain water', moisture that will soon nourish the soil for planting. Fish begin to swim "
        "upward, breaking through thinning ice.",
        "What frozen parts of yourself are ready to thaw?",
        "A season for Health and Rest: nourish yourself as spring nourishes the earth",
        Season.SPRING,
    ),
    Sekki(
        "keichitsu", "啓蟄", "Keichitsu", "Awakening of Insects", 3, 6,
        "Hibernating creatures emerge. Thunder stirs the sky.",
        "The word 啓蟄 means 'opening' and 'insects hiding in the ground.' Spring thunder awakens "
        "dormant creatures. Caterpillars become butterflies. This sekki honors the stirring of life "
        "that has been waiting through winter.",
        "What dormant dreams are ready to emerge?",
        "A season for Create and Joy: energy rises, let it move you",
        Season.SPRING,
    ),
    Sekki(
        "shunbun", "春分", "Shunbun", "Spring Equinox", 3, 21,
        "Day and night are equal. Swallows return from the south.",
        "One of two days when light and darkness are perfectly balanced. In Japan, this marks "
        "Ohigan, a time to honor ancestors and reflect on the middle path. Swallows return, cherry "
        "blossoms begin their brief, beautiful bloom.",
        "Where do you seek balance between action and stillness?",
        "A season for Review: pause at the midpoint, recalibrate your path",
        Season.SPRING,
    ),
    Sekki(
        "seimei", "清明", "Seimei", "Clear and Bright", 4, 5,
        "The air is fresh and clear. Cherry blossoms reach full bloom.",
        "The name evokes the pure, bright quality of spring at its peak. In China, this is Qingming "
        "Festival, a time to tend graves and celebrate renewal. Everything seems to shimmer with "
        "possibility and fresh beginnings.",
        "What clarity is emerging in your vision?",
        "A season for Focus and Create: clarity breeds momentum",
        Season.SPRING,
    ),
    Sekki(
        "kokuu", "穀雨", "Kokuu", "Grain Rain", 4, 20,
        "Spring rains nourish the crops. Peonies bloom.",
        "The final spring sekki brings the gentle rains essential for grain crops. Farmers prepare "
        "rice paddies. Peonies, the 'king of flowers' in East Asia, reach full magnificence. The "
        "earth is lush and ready for the work ahead.",
        "What are you cultivating that needs patient tending?",
        "A season for Health and Focus: steady effort brings growth",
        Season.SPRING,
    ),
    # Summer
    Sekki(
        "rikka", "立夏", "Rikka", "Beginning of Summer", 5, 6,
        "Summer begins. Frogs begin to sing.",
        "Summer's first sekki arrives as rice planting season begins. Days noticeably lengthen. "
        "Frogs chorus in the paddies. Wisteria drapes purple curtains. Energy expands outward as "
        "nature reaches toward the sun.",
        "What will you bring to full expression this season?",
        "A season for Joy and Create: embrace the expanding light",
        Season.SUMMER,
    ),
    Sekki(
        "shoman", "小満", "Shōman", "Lesser Fullness", 5, 21,
        "Grain begins to ripen. Life reaches towards fullness.",
        "Grain heads begin to fill but aren't yet ripe, hence 'lesser' fullness. Silkworms feast "
        "on mulberry leaves. Life is abundant but not yet complete. This sekki teaches the beauty "
        "of potential on the cusp of realization.",
        "What is ripening in your life right now?",
        "A season for Focus and Social: share your growing abundance",
        Season.SUMMER,
    ),
    Sekki(
        "boshu", "芒種", "Bōshu", "Grain in Ear", 6, 6,
        "Wheat ripens. Praying mantises hatch.",
        "芒 refers to the 'awns' or bristles on grain heads: wheat is now ready for harvest as rice "
        "planting continues. Mantises emerge as tiny hunters. The rainy season (tsuyu) often "
        "begins, bringing necessary moisture.",
        "What seeds planted long ago are now bearing fruit?",
        "A season for Focus and Health: sustained effort in rising heat",
        Season.SUMMER,
    ),
    Sekki(
        "geshi", "夏至", "Geshi", "Summer Solstice", 6, 21,
        "The longest day. Light reaches its peak.",
        "The sun reaches its highest point. Light is at maximum, darkness at minimum. Yet this peak "
        "marks the beginning of light's retreat. Japanese tradition sees this as a time for "
        "contemplation amidst celebration, as yang begins its turn toward yin.",
        "How will you use this abundance of light?",
        "A season for Joy and Social: celebrate at the peak of brightness",
        Season.SUMMER,
    ),
    Sekki(
        "shosho", "小暑", "Shōsho", "Lesser Heat", 7, 7,
        "Heat begins to intensify. Warm winds blow.",
        "The rainy season ends and true summer heat arrives. Lotus flowers bloom in ponds. Cicadas "
        "begin their chorus. This sekki marks Tanabata, the star festival celebrating celestial "
        "lovers who meet once yearly across the Milky Way.",
        "Where can you find coolness amidst intensity?",
        "A season for Rest and Health: pace yourself in rising heat",
        Season.SUMMER,
    ),
    Sekki(
        "taisho", "大暑", "Taisho", "Greater Heat", 7, 23,
        "The hottest period. Cicadas sing loudly.",
        "The year's most intense heat. Cicadas reach peak volume. Traditional wisdom advises eating "
        "eel for stamina. This is summer's crucible, a time when endurance itself becomes the "
        "practice and seeking shade becomes an art.",
        "What can only grow in this crucible of heat?",
        "A season for Rest and Joy: find shade, seek water, move slowly",
        Season.SUMMER,
    ),
    # Autumn
    Sekki(
        "risshu", "立秋", "Risshū", "Beginning of Autumn", 8, 8,
        "Autumn begins. Cool winds start to blow.",
        "Though still hot, autumn has officially begun. Subtle signs appear: slightly cooler "
        "evenings, a different quality of light. In Japan, seasonal greetings shift from 'heat' to "
        "'lingering heat.' The harvest mindset begins.",
        "What are you ready to harvest?",
        "A season for Review and Create: gather what you've grown",
        Season.AUTUMN,
    ),
    Sekki(
        "shosho_autumn", "処暑", "Shosho", "End of Heat", 8, 23,
        "The heat retreats. Rice ripens in the fields.",
        "処 means 'to stop' or 'to stay': the heat finally begins to subside. Rice paddies turn "
        "golden. Typhoon season peaks. This transitional sekki honors the relief of cooling and "
        "the beauty of golden fields.",
        "What intensity is ready to soften?",
        "A season for Focus and Health: transition mindfully",
        Season.AUTUMN,
    ),
    Sekki(
        "hakuro", "白露", "Hakuro", "White Dew", 9, 8,
        "Dew glistens on grass. Wild geese return.",
        "Morning dew appears white on grass and leaves, a sign of true autumn. Migratory geese "
        "begin their southward journey. The moon viewing season approaches. There's a poetic "
        "melancholy to this sekki, honoring beauty's transience.",
        "What beauty appears in the quiet morning?",
        "A season for Rest and Review: early mornings hold wisdom",
        Season.AUTUMN,
    ),
    Sekki(
        "shubun", "秋分", "Shūbun", "Autumn Equinox", 9, 23,
        "Day and night are equal. Thunder ceases.",
        "The second equinox, another perfect balance of light and dark. Japan observes Ohigan "
        "again, visiting family graves as red spider lilies bloom. The harvest moon rises full. "
        "Thunder storms give way to clear autumn skies.",
        "What balance are you seeking as light fades?",
        "A season for Review and Social: honor what has passed",
        Season.AUTUMN,
    ),
    Sekki(
        "kanro", "寒露", "Kanro", "Cold Dew", 10, 8,
        "Dew turns cold. Chrysanthemums bloom yellow.",
        "Dew becomes cold enough to almost freeze. Chrysanthemums, symbol of longevity and autumn, "
        "reach full bloom. Geese complete their migration. The air sharpens. This sekki marks the "
        "pivot toward winter preparation.",
        "What needs to be released before winter?",
        "A season for Focus and Rest: complete what matters most",
        Season.AUTUMN,
    ),
    Sekki(
        "soko", "霜降", "Sōkō", "Frost Descends", 10, 24,
        "First frost appears. Leaves turn crimson and gold.",
        "The first frost signals autumn's final phase. Maple leaves reach peak color and "
        "momijigari (autumn leaf viewing) season begins. Persimmons ripen to deep orange. There's "
        "profound beauty in this letting go before winter.",
        "What beauty emerges as things let go?",
        "A season for Review and Joy: find beauty in release",
        Season.AUTUMN,
    ),
    # Winter
    Sekki(
        "ritto", "立冬", "Rittō", "Beginning of Winter", 11, 8,
        "Winter begins. Water starts to freeze.",
        "Winter officially arrives. Camellias begin their long bloom. Bears prepare for "
        "hibernation. Traditional preparation includes airing bedding and storing preserved foods. "
        "The energy turns inward, like roots drawing down.",
        "What must you preserve for the long night?",
        "A season for Rest and Focus: conserve energy, go inward",
        Season.WINTER,
    ),
    Sekki(
        "shosetsu", "小雪", "Shōsetsu", "Lesser Snow", 11, 22,
        "Light snow falls. Rainbows hide.",
        "The first light snows dust the mountains. Rainbows become rare as moisture decreases. "
        "Mandarin oranges ripen bright against grey skies. This is a quieting time when nature "
        "whispers rather than shouts.",
        "What quiet work happens in the gathering dark?",
        "A season for Focus and Create: depth emerges in darkness",
        Season.WINTER,
    ),
    Sekki(
        "taisetsu", "大雪", "Taisetsu", "Greater Snow", 12, 7,
        "Heavy snow blankets the land. Bears hibernate.",
        "Deep snow covers the mountains. Salmon complete their spawning journeys. Bears enter full "
        "hibernation. The world becomes muffled and still. This sekki honors the wisdom of deep "
        "rest and the protection of withdrawal.",
        "What needs the protection of deep rest?",
        "A season for Rest and Review: hibernate with purpose",
        Season.WINTER,
    ),
    Sekki(
        "toji", "冬至", "Tōji", "Winter Solstice", 12, 22,
        "The longest night. Light begins its return.",
        "The darkest day, yet the turning point toward light. Traditional practices include yuzu "
        "citrus baths and eating kabocha squash for health. This profound sekki celebrates "
        "persistence through darkness and the promise of renewal.",
        "What light do you carry through the darkness?",
        "A season for Rest and Joy: celebrate the return of light",
        Season.WINTER,
    ),
    Sekki(
        "shokan", "小寒", "Shōkan", "Lesser Cold", 1, 6,
        "The cold deepens. Spring stirs beneath the frost.",
        "The cold intensifies but hasn't peaked. New Year energy mingles with winter stillness. "
        "Beneath the frozen ground, bulbs begin their slow awakening. This is the 'cold before the "
        "cold', a time of quiet anticipation.",
        "What seeds are you nurturing in stillness?",
        "A season for Focus and Rest: deep work flourishes in quietude",
        Season.WINTER,
    ),
    Sekki(
        "daikan", "大寒", "Daikan", "Greater Cold", 1, 20,
        "The coldest period. Ice is at its thickest.",
        "The year's final sekki brings its deepest cold. Ice reaches maximum thickness. Yet this "
        "extremity precedes spring: in two weeks, Risshun arrives. The coldest moment contains the "
        "seed of warmth. Endurance brings transformation.",
        "What strength grows in enduring the cold?",
        "A season for Rest and Health: warmth is precious, share it",
        Season.WINTER,
    ),
]

# Calendar-year order for lookups; the last entry also covers early January
_BY_START = sorted(SEKKI_DATA, key=lambda s: s.start)


def sekki_for(value: date) -> Sekki:
    """The sekki whose span contains value."""
    current = _BY_START[-1]
    for sekki in _BY_START:
        if sekki.start <= (value.month, value.day):
            current = sekki
        else:
            break
    return current


def next_transition(value: date) -> Tuple[Sekki, date]:
    """The sekki following the one containing value, and the date it starts."""
    index = SEKKI_DATA.index(sekki_for(value))
    upcoming = SEKKI_DATA[(index + 1) % len(SEKKI_DATA)]
    starts = date(value.year, upcoming.start_month, upcoming.start_day)
    if starts <= value:
        starts = date(value.year + 1, upcoming.start_month, upcoming.start_day)
    return upcoming, starts


def days_until_next(value: date) -> int:
    _, starts = next_transition(value)
    return (starts - value).days
