from generations import assign_generations
from ownership import assign_ownership, canonical_roots, cluster_members, is_canonical_root


def test_smaller_id_of_root_couple_leads(couple_with_kids):
    gens = assign_generations(couple_with_kids)
    assert is_canonical_root(couple_with_kids, gens, 1)
    assert not is_canonical_root(couple_with_kids, gens, 2)
    assert canonical_roots(couple_with_kids, gens) == [1]


def test_smaller_id_leads_regardless_of_order(make_store):
    store = make_store("8,B,,Female,0,0,3", "3,A,,Male,0,0,8")
    gens = assign_generations(store)
    assert canonical_roots(store, gens) == [3]


def test_missing_spouse_does_not_block_root(make_store):
    store = make_store("5,A,,Male,0,0,1")
    gens = assign_generations(store)
    assert canonical_roots(store, gens) == [5]


def test_cluster_claims_spouses_and_children(couple_with_kids):
    owners = assign_ownership(couple_with_kids, assign_generations(couple_with_kids))
    assert owners == {1: 1, 2: 1, 3: 1, 4: 1}


def test_first_claim_wins(intermarried_families):
    store = intermarried_families
    owners = assign_ownership(store, assign_generations(store))

    # Fay (6) is Cole and Dora's daughter but is reached first through her husband
    assert owners == {1: 1, 2: 1, 5: 1, 6: 1, 7: 1, 3: 3, 4: 3}
    assert sorted(cluster_members(owners, 3)) == [3, 4]


def test_every_reached_person_has_one_owner(intermarried_families):
    store = intermarried_families
    owners = assign_ownership(store, assign_generations(store))
    roots = set(owners.values())
    assert roots == {1, 3}
    assert sum(len(cluster_members(owners, r)) for r in roots) == len(owners)
