from models import Person
from store import RecordStore


def test_load_replaces_state(make_store):
    store = make_store("1,A,,Male,0,0,", "2,B,,Female,0,0,")
    store.load([Person(id=9, name="Z", role="", gender="")])
    assert len(store) == 1
    assert store.get(1) is None
    assert store.get(9).name == "Z"


def test_duplicate_ids_keep_first(make_store):
    store = make_store("1,First,,Male,0,0,", "1,Second,,Male,0,0,")
    assert len(store) == 1
    assert store.get(1).name == "First"


def test_get_missing_returns_none(make_store):
    store = make_store("1,A,,Male,0,0,")
    assert store.get(42) is None
    assert 42 not in store
    assert 1 in store


def test_children_of_in_store_order(make_store):
    store = make_store(
        "1,P,,Male,0,0,",
        "5,C5,,Male,1,0,",
        "3,C3,,Male,0,1,",
        "4,Other,,Male,0,0,",
    )
    assert store.children_of(1) == [5, 3]
    assert store.children_of(0) == []


def test_spouses_of_skips_missing(make_store):
    store = make_store("1,A,,Male,0,0,99|2", "2,B,,Female,0,0,1")
    assert store.spouses_of(1) == [2]


def test_family_children_grouping(make_store):
    store = make_store(
        "1,P,,Male,0,0,2|3|4|5",
        "2,S0,,Female,0,0,1",
        "3,S1,,Female,0,0,1",
        "4,S2,,Female,0,0,1",
        "5,S3,,Female,0,0,1",
        "10,With S2,,Male,1,4,",
        "11,With S0,,Male,1,2,",
        "12,Unknown mother,,Male,1,0,",
        "13,With S1,,Male,1,3,",
        "14,With S3,,Male,1,5,",
        "15,Missing mother,,Male,1,99,",
        "16,Only S0,,Male,0,2,",
    )
    # left spouses (S0, S1), center, right spouses (S2, S3)
    assert store.family_children(1) == [11, 13, 12, 15, 16, 10, 14]


def test_family_children_ties_break_by_id(couple_with_kids):
    assert couple_with_kids.family_children(1) == [3, 4]
    assert couple_with_kids.family_children(2) == [3, 4]


def test_relationships(couple_with_kids):
    rels = {(r.person1_id, r.person2_id, r.relationship_type) for r in couple_with_kids.relationships()}
    assert (1, 2, "SPOUSE_OF") in rels
    assert (2, 1, "SPOUSE_OF") in rels
    assert (1, 3, "PARENT_OF") in rels
    assert (2, 4, "PARENT_OF") in rels
    assert len(rels) == 6


def test_is_connected_to(couple_with_kids):
    assert couple_with_kids.is_connected_to(3, {1})
    assert couple_with_kids.is_connected_to(1, {4})
    assert couple_with_kids.is_connected_to(1, {2})
    assert not couple_with_kids.is_connected_to(3, {4})
