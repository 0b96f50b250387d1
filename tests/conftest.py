import pytest

from parsing import parse_csv_lines
from store import RecordStore

HEADER = "ID,Name,Role,Gender,FatherID,MotherID,Spouses"


def store_from_rows(*rows: str) -> RecordStore:
    return RecordStore(parse_csv_lines([HEADER, *rows]))


@pytest.fixture
def make_store():
    """Build a RecordStore from CSV data rows (header added automatically)."""
    return store_from_rows


@pytest.fixture
def couple_with_kids():
    return store_from_rows(
        "1,Adam,Father,Male,0,0,2",
        "2,Beth,Mother,Female,0,0,1",
        "3,Carl,Son,Male,1,2,",
        "4,Dana,Daughter,Female,1,2,",
    )


@pytest.fixture
def intermarried_families():
    # Two root couples whose children marry each other
    return store_from_rows(
        "1,Adam,,Male,0,0,2",
        "2,Beth,,Female,0,0,1",
        "3,Cole,,Male,0,0,4",
        "4,Dora,,Female,0,0,3",
        "5,Evan,,Male,1,2,6",
        "6,Fay,,Female,3,4,5",
        "7,Gus,,Male,5,6,",
    )
