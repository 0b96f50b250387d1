"""CSV and GEDCOM parsing into Person records."""

import csv
import logging
import re
from collections.abc import Iterable
from pathlib import Path

from ged4py import GedcomReader

from models import Person

logger = logging.getLogger(__name__)

CSV_COLUMNS = ("id", "name", "role", "gender", "father", "mother", "spouses")

# GEDCOM SEX values mapped onto the gender labels used in the CSV format
SEX_MAP = {
    "M": "Male",
    "F": "Female",
}


class RecordError(ValueError):
    """Raised when a single input row cannot be turned into a Person."""


def parse_spouses(field: str, person_id: int) -> tuple[list[int], set[int]]:
    """
    Parse a spouse field like "2x|3" into (spouse ids, former spouse ids).

    A trailing "x" or "X" marks a former spouse. Empty tokens and "0" mean no
    spouse, and a self reference is dropped.
    """
    spouses: list[int] = []
    former: set[int] = set()

    for token in field.split("|"):
        token = token.strip()
        if not token:
            continue

        is_former = token[-1] in ("x", "X")
        if is_former:
            token = token[:-1]

        try:
            spouse_id = int(token)
        except ValueError:
            raise RecordError(f"Bad spouse token {token!r}") from None

        if spouse_id == 0 or spouse_id == person_id or spouse_id in spouses:
            continue
        spouses.append(spouse_id)
        if is_former:
            former.add(spouse_id)

    return spouses, former


def parse_row(parts: list[str]) -> Person:
    """Build a Person from one CSV row, raising RecordError if it is malformed."""
    if len(parts) < len(CSV_COLUMNS):
        raise RecordError(f"Expected {len(CSV_COLUMNS)} columns, got {len(parts)}")

    try:
        person_id = int(parts[0])
        father_id = int(parts[4])
        mother_id = int(parts[5])
    except ValueError as e:
        raise RecordError(str(e)) from None

    if person_id <= 0:
        raise RecordError(f"Person id must be positive, got {person_id}")

    spouses, former = parse_spouses(parts[6], person_id)

    return Person(
        id=person_id,
        name=parts[1],
        role=parts[2],
        gender=parts[3],
        father_id=father_id,
        mother_id=mother_id,
        spouses=spouses,
        former_spouses=former,
    )


def parse_csv_lines(lines: Iterable[str]) -> list[Person]:
    """
    Decode family CSV lines (header first) into Person records.

    Malformed rows are skipped; the file is hand-edited and one bad row must
    not hide the rest of the tree.
    """
    persons: list[Person] = []
    reader = csv.reader(lines)

    # Skip header
    next(reader, None)

    for parts in reader:
        if not parts or not any(p.strip() for p in parts):
            continue
        try:
            persons.append(parse_row(parts))
        except RecordError as e:
            logger.debug("Skipping row %d %r: %s", reader.line_num, parts, e)

    return persons


def parse_csv(filepath: Path) -> list[Person]:
    """Read a family CSV file. A UTF-8 byte order mark is ignored; undecodable bytes become U+FFFD."""
    with open(filepath, encoding="utf-8-sig", errors="replace", newline="") as f:
        return parse_csv_lines(f)


def extract_numeric_id(xref_id: str) -> int:
    """Extract numeric part from GEDCOM xref_id like '@I_347421849@' or 'I674624289'."""
    # Remove @ symbols and extract all digits
    digits = re.sub(r"[^0-9]", "", xref_id)
    if not digits:
        raise ValueError(f"No numeric ID found in: {xref_id}")
    return int(digits)


def parse_gedcom(filepath: Path) -> GedcomReader:
    """Parse a GEDCOM file and return the reader object."""
    return GedcomReader(str(filepath))


def extract_name(indi) -> str:
    """Extract the display name from an individual record."""
    name_rec = indi.sub_tag("NAME")
    if name_rec is None or name_rec.value is None:
        return "Unknown"

    name_value = name_rec.value

    # ged4py returns NAME as tuple: (given, surname, suffix)
    if isinstance(name_value, tuple):
        parts = [p for p in name_value if p]
        return " ".join(parts) if parts else "Unknown"

    # Fallback: string format "Given /Surname/"
    return str(name_value).replace("/", "").strip() or "Unknown"


def extract_gender(indi) -> str:
    """Map the SEX tag onto a gender label ("" when absent or unknown)."""
    sex_rec = indi.sub_tag("SEX")
    if sex_rec is None or not sex_rec.value:
        return ""
    return SEX_MAP.get(str(sex_rec.value).upper(), "")


def _xref_to_id(rec) -> int | None:
    if rec is None or not rec.xref_id:
        return None
    try:
        return extract_numeric_id(rec.xref_id)
    except ValueError:
        return None


def normalize_gedcom(reader: GedcomReader) -> list[Person]:
    """
    Convert GEDCOM individuals and families into Person records.

    FAM records supply each child's father and mother and the spouse links
    between HUSB and WIFE, in family order. A family with a DIV event makes
    the spouses former spouses of each other.
    """
    persons: list[Person] = []
    by_id: dict[int, Person] = {}

    # First pass: extract all individuals
    for rec in reader.records0("INDI"):
        indi_id = _xref_to_id(rec)
        if indi_id is None or indi_id in by_id:
            logger.debug("Skipping individual %r", rec.xref_id)
            continue

        person = Person(
            id=indi_id,
            name=extract_name(rec),
            role="",
            gender=extract_gender(rec),
        )
        persons.append(person)
        by_id[indi_id] = person

    # Second pass: families
    for rec in reader.records0("FAM"):
        husb_id = _xref_to_id(rec.sub_tag("HUSB"))
        wife_id = _xref_to_id(rec.sub_tag("WIFE"))
        divorced = rec.sub_tag("DIV") is not None

        husb = by_id.get(husb_id) if husb_id else None
        wife = by_id.get(wife_id) if wife_id else None

        # Spouse relationship
        if husb and wife and husb.id != wife.id:
            for a, b in ((husb, wife), (wife, husb)):
                if b.id not in a.spouses:
                    a.spouses.append(b.id)
                if divorced:
                    a.former_spouses.add(b.id)

        # Parent-child relationships
        for child in rec.sub_tags("CHIL"):
            child_id = _xref_to_id(child)
            kid = by_id.get(child_id) if child_id else None
            if kid is None:
                continue
            if husb_id and not kid.father_id:
                kid.father_id = husb_id
            if wife_id and not kid.mother_id:
                kid.mother_id = wife_id

    return persons


def parse_gedcom_people(filepath: Path) -> list[Person]:
    """Read a GEDCOM file into Person records."""
    return normalize_gedcom(parse_gedcom(filepath))


def load_people(filepath: Path) -> list[Person]:
    """Load people from a GEDCOM (.ged) or family CSV file."""
    if filepath.suffix.lower() == ".ged":
        return parse_gedcom_people(filepath)
    return parse_csv(filepath)
