import pytest

from parsing import RecordError, load_people, parse_csv, parse_csv_lines, parse_row, parse_spouses

HEADER = "ID,Name,Role,Gender,FatherID,MotherID,Spouses"


def test_parse_spouses_marks_former_and_keeps_order():
    spouses, former = parse_spouses("2x|3|4X", person_id=1)
    assert spouses == [2, 3, 4]
    assert former == {2, 4}


def test_parse_spouses_drops_zero_self_and_repeats():
    spouses, former = parse_spouses("0|1|5|5x", person_id=1)
    assert spouses == [5]
    assert former == set()


def test_parse_spouses_empty_field():
    assert parse_spouses("", person_id=1) == ([], set())


def test_parse_spouses_rejects_garbage():
    with pytest.raises(RecordError):
        parse_spouses("2|abc", person_id=1)


def test_parse_row_builds_person():
    p = parse_row(["7", "Anna", "Aunt", "Female", "3", "4", "8x|9"])
    assert p.id == 7
    assert p.name == "Anna"
    assert p.role == "Aunt"
    assert p.is_female
    assert (p.father_id, p.mother_id) == (3, 4)
    assert p.spouses == [8, 9]
    assert p.is_former_spouse(8)
    assert not p.is_former_spouse(9)


def test_gender_is_case_sensitive():
    p = parse_row(["7", "Anna", "", "female", "0", "0", ""])
    assert not p.is_female


def test_malformed_rows_are_skipped():
    lines = [
        HEADER,
        "1,Good,,Male,0,0,",
        "x,Bad id,,Male,0,0,",
        "2,Bad father,,Male,abc,0,",
        "3,Bad spouse,,Male,0,0,1|zz",
        "4,Too short,,Male",
        "0,Zero id,,Male,0,0,",
        "",
        "5,Also good,,Female,1,0,1x",
    ]
    people = parse_csv_lines(lines)
    assert [p.id for p in people] == [1, 5]


def test_extra_columns_are_ignored():
    people = parse_csv_lines([HEADER, "1,A,,Male,0,0,,notes"])
    assert [p.id for p in people] == [1]


def test_parse_csv_skips_bom_and_header(tmp_path):
    path = tmp_path / "family.csv"
    path.write_text("\ufeff" + HEADER + "\r\n1,Adam,Grandpa,Male,0,0,2\r\n2,Eve,Grandma,Female,0,0,1\r\n",
                    encoding="utf-8")
    people = parse_csv(path)
    assert [p.name for p in people] == ["Adam", "Eve"]
    assert people[0].spouses == [2]


def test_load_people_picks_csv_by_default(tmp_path):
    path = tmp_path / "family.txt"
    path.write_text(HEADER + "\n1,Solo,,Male,0,0,\n", encoding="utf-8")
    assert [p.id for p in load_people(path)] == [1]


GEDCOM = """0 HEAD
1 CHAR UTF-8
0 @I1@ INDI
1 NAME John /Smith/
1 SEX M
0 @I2@ INDI
1 NAME Jane /Doe/
1 SEX F
0 @I3@ INDI
1 NAME Jim /Smith/
1 SEX M
0 @F1@ FAM
1 HUSB @I1@
1 WIFE @I2@
1 CHIL @I3@
1 DIV Y
0 TRLR
"""


def test_gedcom_import(tmp_path):
    path = tmp_path / "tree.ged"
    path.write_text(GEDCOM, encoding="utf-8")

    people = {p.id: p for p in load_people(path)}

    assert set(people) == {1, 2, 3}
    assert people[1].name == "John Smith"
    assert people[1].gender == "Male"
    assert people[2].is_female
    assert (people[3].father_id, people[3].mother_id) == (1, 2)
    assert people[1].spouses == [2]
    assert people[2].spouses == [1]
    assert people[1].is_former_spouse(2)


def test_parse_csv_tolerates_non_utf8_bytes(tmp_path):
    path = tmp_path / "family.csv"
    path.write_bytes(HEADER.encode() + b"\n1,Adam,,Male,0,0,\n2,Ren\xe9,,Male,0,0,\n")

    people = parse_csv(path)

    assert [p.id for p in people] == [1, 2]
    assert people[1].name.startswith("Ren")
