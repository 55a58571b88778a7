"""Application constants.

Contains the roster field alias table, the default paper catalogue and the
patterns used to read free-text timeslots.
"""

import re

# ---------------------------------------------------------------------------
# Roster field aliases
# The roster was imported from a bilingual spreadsheet, so the same concept
# can live under several column names.  For each canonical key the aliases
# are listed in priority order; the canonical key itself is always tried first.
# ---------------------------------------------------------------------------
PHONE_COLUMN = "電話號碼 Phone Number"

FIELD_ALIASES: dict[str, tuple[str, ...]] = {
    "barcode": ("Barcode", PHONE_COLUMN, "phoneNumber"),
    "phoneNumber": (PHONE_COLUMN, "Barcode", "barcode"),
    "candidateName": ("Name on barcode", "name"),
    "school": ("學校名稱 School of Candidates",),
    "timeslot": ("考試日期 Timeslot",),
}

# ---------------------------------------------------------------------------
# Ledger keys stored alongside the roster columns
# ---------------------------------------------------------------------------
LAST_CHECK_IN_KEY = "lastCheckIn"
CHECK_IN_COUNT_KEY = "checkInCount"
CHECK_INS_KEY = "checkIns"
CHECK_IN_TOKENS_KEY = "checkInTokens"

# ---------------------------------------------------------------------------
# Papers
# ---------------------------------------------------------------------------
DEFAULT_PAPERS: tuple[tuple[str, str], ...] = (
    ("paper1", "Chemistry Paper 1"),
    ("paper2", "Chemistry Paper 2"),
)
DEFAULT_PAPER_TIMES: tuple[str, ...] = ("08:30 AM", "11:00 AM")
DATE_TBD = "Date TBD"

# ---------------------------------------------------------------------------
# Timeslot parsing ("15/02/2026 08:30am-11:00am", day first)
# ---------------------------------------------------------------------------
TIMESLOT_DATE_RE = re.compile(r"(\d{1,2})\s*/\s*(\d{1,2})\s*/\s*(\d{4})")
TIMESLOT_TIME_RE = re.compile(r"(\d{1,2}:\d{2}\s*(?:am|pm))", re.IGNORECASE)
