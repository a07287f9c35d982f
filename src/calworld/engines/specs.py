"""
calworld.engines.specs
----------------------
Built-in variants as pure data. `factory.make_engine` turns each into an engine.
"""

from __future__ import annotations

from typing import Dict

from ..core.types import EngineId, VariantSpec
from .coptic import AlexandrianParams
from .eras import EraParams
from .french import FrenchRepublicanParams
from .gregorian import GregorianParams, ThaiSolarParams
from .hebrew import HebrewParams
from .hijri import ArithmeticHijriParams
from .hijri_data import UMALQURA_VARIANT, UmalquraParams
from .indian import IndianParams
from .japanese import JapaneseCivilParams
from .julian import HistoricParams, JulianParams
from .lunisolar import (
    CHINA_OFFSETS,
    JAPAN_OFFSETS,
    KOREA_OFFSETS,
    VIETNAM_OFFSETS,
    LunisolarParams,
)
from .persian import PersianParams
from ..core.time import gregorian_to_epoch_day


def _spec(family, name: str, params, **meta) -> VariantSpec:
    return VariantSpec(id=EngineId(family, name), params=params, meta=meta or None)


# ============================================================
# SOLAR SCHEMES
# ============================================================

GREGORIAN = _spec("gregorian", "gregorian", GregorianParams())

JULIAN = _spec("era", "julian", EraParams("julian", JulianParams(), "bc-ad"))

# First Gregorian day of each cutover
CUTOVERS = {
    "rome": (1582, 10, 15),
    "britain": (1752, 9, 14),
    "russia": (1918, 2, 14),
    "sweden": (1753, 3, 1),
}

HISTORIC_SPECS: Dict[str, VariantSpec] = {
    f"historic-{region}": _spec(
        "era", f"historic-{region}",
        EraParams(f"historic-{region}", HistoricParams(f"historic-{region}", cutover), "bc-ad"),
    )
    for region, cutover in CUTOVERS.items()
}

COPTIC = _spec("coptic", "coptic", AlexandrianParams("coptic", "coptic", (284, 8, 29), 1, 9999))

# Years in Amete Mihret numbering; Amete Alem 1 is Mihret -5499
ETHIOPIAN = _spec(
    "era", "ethiopian",
    EraParams("ethiopian", AlexandrianParams("ethiopian", "ethiopian", (8, 8, 29), -5499, 9999), "ethiopian"),
)

PERSIAN_SPECS: Dict[str, VariantSpec] = {
    "persian": _spec("persian", "persian", PersianParams("persian", "borkowski")),
    "persian-khayyam": _spec("persian", "persian-khayyam", PersianParams("persian-khayyam", "khayyam")),
    "persian-birashk": _spec("persian", "persian-birashk", PersianParams("persian-birashk", "birashk")),
    "persian-astronomical": _spec(
        "persian", "persian-astronomical",
        PersianParams("persian-astronomical", "astronomical", max_year=2378),
    ),
}

HEBREW = _spec("hebrew", "hebrew", HebrewParams())
INDIAN = _spec("indian", "indian", IndianParams())
THAI = _spec("thai", "thai", ThaiSolarParams())

MINGUO = _spec("era", "minguo", EraParams("minguo", GregorianParams("minguo-base"), "minguo", default_era="ROC"))
JUCHE = _spec("era", "juche", EraParams("juche", GregorianParams("juche-base"), "juche", default_era="JUCHE"))

FRENCH_SPECS: Dict[str, VariantSpec] = {
    "french-republican": _spec("french", "french-republican", FrenchRepublicanParams()),
    "french-republican-romme": _spec(
        "french", "french-republican-romme",
        FrenchRepublicanParams("french-republican-romme", "romme"),
    ),
}

SOLAR_SPECS: Dict[str, VariantSpec] = {
    "gregorian": GREGORIAN,
    "julian": JULIAN,
    **HISTORIC_SPECS,
    "coptic": COPTIC,
    "ethiopian": ETHIOPIAN,
    **PERSIAN_SPECS,
    "hebrew": HEBREW,
    "indian": INDIAN,
    "thai": THAI,
    "minguo": MINGUO,
    "juche": JUCHE,
    **FRENCH_SPECS,
}


# ============================================================
# HIJRI
# ============================================================

# (variant, leap pattern, astronomical epoch)
_HIJRI_ARITHMETIC = (
    ("islamic-eastc", "east", False),
    ("islamic-easta", "east", True),
    ("islamic-civil", "west", False),
    ("islamic-tbla", "west", True),
    ("islamic-fatimidc", "fatimid", False),
    ("islamic-fatimida", "fatimid", True),
    ("islamic-habashalhasibc", "habash", False),
    ("islamic-habashalhasiba", "habash", True),
)

HIJRI_SPECS: Dict[str, VariantSpec] = {
    name: _spec("hijri", name, ArithmeticHijriParams(name, pattern, astronomical))
    for name, pattern, astronomical in _HIJRI_ARITHMETIC
}
HIJRI_SPECS[UMALQURA_VARIANT] = _spec("hijri", UMALQURA_VARIANT, UmalquraParams(), source="hijri-converter")


# ============================================================
# EAST ASIAN
# ============================================================

VIETNAM_MIN = gregorian_to_epoch_day(1813, 2, 1)

LUNISOLAR_SPECS: Dict[str, VariantSpec] = {
    "chinese": _spec("lunisolar", "chinese", LunisolarParams("chinese", CHINA_OFFSETS)),
    "korean": _spec("lunisolar", "korean", LunisolarParams("korean", KOREA_OFFSETS)),
    "vietnamese": _spec(
        "lunisolar", "vietnamese",
        LunisolarParams("vietnamese", VIETNAM_OFFSETS, min_epoch_day=VIETNAM_MIN),
    ),
    "japanese-lunisolar": _spec("lunisolar", "japanese-lunisolar", LunisolarParams("japanese-lunisolar", JAPAN_OFFSETS)),
}

JAPANESE = _spec(
    "era", "japanese",
    EraParams(
        "japanese",
        JapaneseCivilParams("japanese-base", LunisolarParams("japanese-base-lunisolar", JAPAN_OFFSETS)),
        "nengo",
    ),
)


ALL_SPECS: Dict[str, VariantSpec] = {
    **SOLAR_SPECS,
    **HIJRI_SPECS,
    **LUNISOLAR_SPECS,
    "japanese": JAPANESE,
}
