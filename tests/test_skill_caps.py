"""Tests for the weapon skill cap table."""

from eqsim.data.skill_caps import (
    CLASSES,
    SKILLS,
    build_weapon_skill_cap_table,
    get_weapon_skill_cap,
    resolve_class_index,
)


class TestResolveClassIndex:
    def test_names_and_codes(self) -> None:
        assert resolve_class_index("warrior") == 0
        assert resolve_class_index("Monk") == 6
        assert resolve_class_index("ROG") == 8
        assert resolve_class_index("bst") == 14

    def test_index(self) -> None:
        assert resolve_class_index(3) == 3
        assert resolve_class_index(15) == -1

    def test_unknown(self) -> None:
        assert resolve_class_index("xyz") == -1
        assert resolve_class_index("") == -1


class TestGetWeaponSkillCap:
    def test_class_max(self) -> None:
        assert get_weapon_skill_cap("warrior", "1hs", 60) == 250

    def test_level_cap(self) -> None:
        assert get_weapon_skill_cap("warrior", "1hs", 10) == 55

    def test_class_cannot_use(self) -> None:
        assert get_weapon_skill_cap("monk", "1hs", 60) == 0

    def test_unknown_class_or_skill(self) -> None:
        assert get_weapon_skill_cap("xyz", "1hs", 60) == 0
        assert get_weapon_skill_cap("warrior", "polearm", 60) == 0

    def test_level_clamped(self) -> None:
        assert get_weapon_skill_cap("warrior", "1hs", 100) == 250
        assert get_weapon_skill_cap("warrior", "1hs", 0) == 10


class TestBuildTable:
    def test_shape(self) -> None:
        table = build_weapon_skill_cap_table()
        assert set(table) == set(SKILLS)
        assert len(table["1hb"]) == len(CLASSES)
        assert len(table["1hb"][0]) == 61

    def test_index_zero_unused(self) -> None:
        table = build_weapon_skill_cap_table()
        assert all(row[0] == 0 for row in table["2hs"])

    def test_values(self) -> None:
        table = build_weapon_skill_cap_table()
        assert table["h2h"][6][60] == 252
        assert table["archery"][3][60] == 75
        assert table["1hb"][0][1] == 10
