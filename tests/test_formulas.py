"""Tests for the combat formula library."""

import pytest

from eqsim.config import Target, Weapon
from eqsim.formulas import (
    add_elemental_to_damage,
    apply_crit_damage,
    apply_elemental_resist,
    backstab_base_damage,
    backstab_min_hit,
    calc_melee_damage,
    can_triple_attack,
    check_double_attack,
    check_dual_wield,
    check_proc,
    check_triple_attack,
    clamp_skill,
    displayed_attack,
    effective_delay_decisec,
    get_avoidance_npc,
    get_crit_chance,
    get_damage_bonus_client,
    get_damage_bonus_npc,
    get_damage_multiplier_params,
    get_hit_chance,
    get_mitigation,
    get_proc_chance_per_swing,
    get_resist_for_elem_type,
    is_warrior_class,
    kick_min_hit,
    roll_d20,
    roll_damage_multiplier,
    roll_hit,
    roll_melee_crit,
    str_offense_bonus,
)
from eqsim.rng import create_rng


class Seq:
    """A fake Rng that hands out fixed values and fails if over-consumed."""

    def __init__(self, *values: float) -> None:
        self.values = list(values)

    def __call__(self) -> float:
        return self.values.pop(0)


class TestHitChance:
    def test_high_to_hit_branch(self) -> None:
        """When to-hit * 1.21 beats avoidance, chance = 1 - b / (2 * 1.21a)."""
        assert get_hit_chance(400, 460) == pytest.approx(1 - 470 / (410 * 1.21 * 2))

    def test_low_to_hit_branch(self) -> None:
        assert get_hit_chance(0, 460) == pytest.approx(10 * 1.21 / (470 * 2))

    def test_to_hit_is_capped(self) -> None:
        assert get_hit_chance(1000, 460) == get_hit_chance(550, 460)

    def test_defaults(self) -> None:
        assert get_hit_chance(None, None) == get_hit_chance(400, 460)

    def test_monotonic_in_to_hit(self) -> None:
        chances = [get_hit_chance(th, 460) for th in range(0, 800, 5)]
        assert chances == sorted(chances)

    def test_monotonic_in_avoidance(self) -> None:
        chances = [get_hit_chance(511, av) for av in range(0, 1000, 5)]
        assert chances == sorted(chances, reverse=True)

    def test_always_a_probability(self) -> None:
        for th in range(0, 600, 50):
            for av in range(1, 600, 50):
                assert 0 <= get_hit_chance(th, av) <= 1

    def test_negative_to_hit_clamped(self) -> None:
        assert get_hit_chance(-100, 460) == 0.0


class TestRollHit:
    def test_from_behind_uses_one_roll(self) -> None:
        rng = Seq(0.0)
        assert roll_hit(511, 460, rng, True) is True
        assert rng.values == []

    def test_miss(self) -> None:
        assert roll_hit(511, 460, Seq(0.99), True) is False
        assert roll_hit(511, 460, Seq(0.99), False) is False

    def test_front_attack_can_be_avoided(self) -> None:
        """A hit roll that lands can still be blocked/parried/dodged."""
        assert roll_hit(511, 460, Seq(0.0, 0.05), False) is False
        assert roll_hit(511, 460, Seq(0.0, 0.5), False) is True


class TestAvoidance:
    def test_capped_at_460(self) -> None:
        assert get_avoidance_npc(60) == 460

    def test_capped_at_400_up_to_50(self) -> None:
        assert get_avoidance_npc(50) == 400
        assert get_avoidance_npc(45) == 400

    def test_uncapped_low_level(self) -> None:
        assert get_avoidance_npc(10) == 95

    def test_default_level(self) -> None:
        assert get_avoidance_npc(None) == 460


class TestMitigation:
    def test_level_60_capped(self) -> None:
        assert get_mitigation(60) == 200

    def test_ac_replaces_capped_mitigation(self) -> None:
        assert get_mitigation(60, 300) == 300

    def test_ac_ignored_below_cap(self) -> None:
        """Level 40: 40 * 4.1 - 15 = 149, under the cap, so AC doesn't count."""
        assert get_mitigation(40, 300) == 149

    def test_low_levels(self) -> None:
        assert get_mitigation(10) == 30
        assert get_mitigation(2) == 8

    def test_ac_bonuses(self) -> None:
        """+4/3 item AC and +1/4 spell AC on top of the base."""
        assert get_mitigation(60, None, 30, 40) == 200 + 40 + 10

    def test_floor_of_one(self) -> None:
        assert get_mitigation(1, None, -30, 0) == 1


class TestDamageRoll:
    def test_midpoint(self) -> None:
        """Equal rolls land at avg / 2 * 20 / avg: index 9, roll 10."""
        assert roll_d20(100, 100, Seq(0.0, 0.0)) == 10

    def test_clamped_high(self) -> None:
        assert roll_d20(100, 100, Seq(0.999, 0.0)) == 20

    def test_clamped_low(self) -> None:
        assert roll_d20(0, 1000, Seq(0.0, 0.999)) == 1

    def test_non_positive_average(self) -> None:
        assert roll_d20(-10, -10, Seq(0.5, 0.5)) == 1

    def test_always_in_range(self) -> None:
        rng = create_rng(7)
        for rating in (0, 50, 372, 1000):
            for mit in (0, 1, 200, 600):
                for _ in range(50):
                    assert 1 <= roll_d20(rating, mit, rng) <= 20

    def test_calc_melee_damage(self) -> None:
        assert calc_melee_damage(10, 100, 100, Seq(0.0, 0.0)) == 10

    def test_calc_melee_damage_bonus(self) -> None:
        assert calc_melee_damage(10, 100, 100, Seq(0.0, 0.0), 3) == 13

    def test_calc_melee_damage_minimum(self) -> None:
        assert calc_melee_damage(0, 100, 100, Seq(0.0, 0.0)) == 1


class TestElemental:
    def test_high_resist_blocks_everything(self) -> None:
        """No roll is made when resist is above 200."""
        assert apply_elemental_resist(100, 201, Seq()) == 0

    def test_low_roll_fully_resisted(self) -> None:
        assert apply_elemental_resist(100, 35, Seq(0.0)) == 0

    def test_partial(self) -> None:
        """floor(0.5 * 201) + 1 - 35 = 66% gets through."""
        assert apply_elemental_resist(100, 35, Seq(0.5)) == 66

    def test_full(self) -> None:
        assert apply_elemental_resist(100, 0, Seq(0.999)) == 100

    def test_never_exceeds_weapon_damage(self) -> None:
        rng = create_rng(3)
        for resist in (-50, 0, 35, 150, 200):
            for _ in range(100):
                assert 0 <= apply_elemental_resist(17, resist, rng) <= 17

    def test_resist_lookup(self) -> None:
        target = Target(cr=50)
        assert get_resist_for_elem_type(target, "cold") == 50
        assert get_resist_for_elem_type(target, "fire") == 35
        assert get_resist_for_elem_type(target, None) == 35

    def test_weapon_without_element(self) -> None:
        assert add_elemental_to_damage(40, Weapon(damage=10, delay=20), Target(), Seq()) == (40, 0)
        assert add_elemental_to_damage(40, None, Target(), Seq()) == (40, 0)

    def test_weapon_with_element(self) -> None:
        weapon = Weapon(damage=10, delay=20, elem_type="fire", elem_damage=100)
        assert add_elemental_to_damage(40, weapon, Target(fr=35), Seq(0.5)) == (106, 66)


class TestDamageMultiplier:
    def test_params(self) -> None:
        assert get_damage_multiplier_params(65, "monk") == (83, 300, 50)
        assert get_damage_multiplier_params(60, "monk") == (79, 290, 60)
        assert get_damage_multiplier_params(60, "warrior") == (77, 285, 65)
        assert get_damage_multiplier_params(56, "rogue") == (72, 265, 70)
        assert get_damage_multiplier_params(40, "monk") == (65, 245, 80)
        assert get_damage_multiplier_params(50, "rogue") == (51, 210, 105)

    def test_no_roll(self) -> None:
        rng = Seq(0.99)
        assert roll_damage_multiplier(300, 50, 60, "rogue", False, rng) == (50, False)
        assert rng.values == []

    def test_bonus_roll(self) -> None:
        """Offense 300: bonus range (300 - 65) / 2 = 117, roll 217%."""
        assert roll_damage_multiplier(300, 50, 60, "rogue", False, Seq(0.0, 0.999)) == (108, True)

    def test_capped_at_max_extra(self) -> None:
        assert roll_damage_multiplier(1000, 50, 60, "", False, Seq(0.0, 0.999)) == (142, True)

    def test_warrior_nudge(self) -> None:
        assert roll_damage_multiplier(300, 50, 60, "warrior", False, Seq(0.0, 0.999)) == (109, True)

    def test_warrior_nudge_on_flat_roll(self) -> None:
        """A 100% roll isn't a multiplied hit, but warriors still get +1."""
        assert roll_damage_multiplier(300, 50, 60, "warrior", False, Seq(0.0, 0.0)) == (51, False)

    def test_no_warrior_nudge_for_archery(self) -> None:
        assert roll_damage_multiplier(300, 50, 60, "warrior", True, Seq(0.0, 0.0)) == (50, False)

    def test_minimum_bonus_range(self) -> None:
        """Base bonus never drops below 10: at most 110%."""
        assert roll_damage_multiplier(0, 100, 60, "", False, Seq(0.0, 0.999)) == (110, True)


class TestCritChance:
    def test_warrior(self) -> None:
        assert get_crit_chance(60, "warrior", 255) == pytest.approx(0.5 + 255 / 90)

    def test_warrior_over_cap_dex(self) -> None:
        assert get_crit_chance(60, "warrior", 355) == pytest.approx(0.5 + 255 / 90 + 100 / 400)

    def test_low_level_warrior(self) -> None:
        assert get_crit_chance(10, "warrior", 255, crit_chance_mult=100) == 0

    def test_archery_ranger(self) -> None:
        assert get_crit_chance(60, "ranger", 255, is_archery=True) == pytest.approx(1.35 + 255 / 34)

    def test_melee_ranger_without_aa(self) -> None:
        assert get_crit_chance(60, "ranger", 255) == 0

    def test_aa_bonus_scales(self) -> None:
        assert get_crit_chance(60, "monk", 255, crit_chance_mult=50) == pytest.approx((0.275 + 255 / 150) * 1.5)

    def test_clamped(self) -> None:
        assert get_crit_chance(60, "monk", 100000, crit_chance_mult=500) == 100


class TestCritDamage:
    def test_normal(self) -> None:
        assert apply_crit_damage(100, 0, 17) == 178

    def test_bonus_not_scaled(self) -> None:
        assert apply_crit_damage(100, 10, 17) == 171

    def test_crippling_blow(self) -> None:
        assert apply_crit_damage(100, 0, 29, True) == 300

    def test_floor(self) -> None:
        assert apply_crit_damage(0, 20, 17) == 1

    def test_no_chance_draws_nothing(self) -> None:
        assert roll_melee_crit(100, 0, 60, "", 255, 0, Seq()) == (100, False)

    def test_crit_roll_fails(self) -> None:
        assert roll_melee_crit(100, 0, 60, "warrior", 255, 0, Seq(0.5)) == (100, False)

    def test_crit_lands(self) -> None:
        assert roll_melee_crit(100, 0, 60, "warrior", 255, 0, Seq(0.0)) == (178, True)

    def test_berserk(self) -> None:
        assert roll_melee_crit(100, 0, 60, "warrior", 255, 0, Seq(0.0), is_berserk=True) == (300, True)

    def test_crippling_blow_chance(self) -> None:
        assert roll_melee_crit(100, 0, 60, "warrior", 255, 0, Seq(0.0, 0.2), crippling_blow_chance=50) == (300, True)
        assert roll_melee_crit(100, 0, 60, "warrior", 255, 0, Seq(0.0, 0.9), crippling_blow_chance=50) == (178, True)


class TestMultiAttack:
    def test_double_attack(self) -> None:
        assert check_double_attack(100, Seq(0.19), "warrior") is True
        assert check_double_attack(100, Seq(0.2), "warrior") is False

    def test_bards_and_beastlords_never_double(self) -> None:
        for class_id in ("bard", "beastlord"):
            assert check_double_attack(10000, Seq(), class_id) is False

    def test_can_triple(self) -> None:
        assert can_triple_attack(60, "warrior")
        assert can_triple_attack(60, "monk")
        assert not can_triple_attack(59, "warrior")
        assert not can_triple_attack(60, "rogue")
        assert not can_triple_attack(None, "monk")

    def test_triple_attack(self) -> None:
        assert check_triple_attack(Seq(0.1), 60, "warrior") is True
        assert check_triple_attack(Seq(0.2), 60, "warrior") is False

    def test_triple_only_for_warrior_and_monk(self) -> None:
        rng = create_rng(11)
        for class_id in ("rogue", "ranger", "bard", "paladin", ""):
            for _ in range(200):
                assert check_triple_attack(rng, 65, class_id) is False
        for _ in range(200):
            assert check_triple_attack(rng, 59, "warrior") is False

    def test_dual_wield(self) -> None:
        assert check_dual_wield(100, Seq(0.26)) is True
        assert check_dual_wield(100, Seq(0.27)) is False


class TestDamageBonus:
    def test_below_28(self) -> None:
        assert get_damage_bonus_client(27, "warrior", 40, True) == 0

    def test_one_hander(self) -> None:
        assert get_damage_bonus_client(60, "warrior", 28, False) == 11

    def test_fast_two_hander(self) -> None:
        assert get_damage_bonus_client(60, "warrior", 27, True) == 12

    def test_two_hander_delay_40(self) -> None:
        """11 level bonus + 22 two-hander level bonus + 1 delay bonus."""
        assert get_damage_bonus_client(60, "warrior", 40, True) == 34

    def test_two_hander_delay_45(self) -> None:
        assert get_damage_bonus_client(60, "warrior", 45, True) == 38

    def test_level_29_two_hander(self) -> None:
        assert get_damage_bonus_client(29, "warrior", 30, True) == 1

    def test_npc(self) -> None:
        assert get_damage_bonus_npc(None, 10) == 0
        assert get_damage_bonus_npc(20, 10) == 20
        assert get_damage_bonus_npc(10, 48) == 8

    def test_warrior_classes(self) -> None:
        assert is_warrior_class("paladin")
        assert not is_warrior_class("monk")


class TestDelayAndProcs:
    def test_effective_delay(self) -> None:
        assert effective_delay_decisec(30, 0) == 30
        assert effective_delay_decisec(30, 50) == 20
        assert effective_delay_decisec(28, None) == 28

    def test_minimum_delay(self) -> None:
        assert effective_delay_decisec(12, 100) == 10

    def test_slow(self) -> None:
        assert effective_delay_decisec(28, -50) == 56

    def test_proc_chance(self) -> None:
        assert get_proc_chance_per_swing(30, False, 0, 255) == pytest.approx(0.1)

    def test_offhand_proc_scaling(self) -> None:
        assert get_proc_chance_per_swing(30, True, 50, 255) == pytest.approx(0.1)
        assert get_proc_chance_per_swing(30, True, 25, 255) == pytest.approx(0.2)

    def test_proc_chance_clamped(self) -> None:
        assert get_proc_chance_per_swing(1000, False, 0, 255) == 1
        assert get_proc_chance_per_swing(0, False, 0, 255) == 0
        assert get_proc_chance_per_swing(30, True, 0, 255) == 1

    def test_proc_chance_in_range(self) -> None:
        for delay in (10, 20, 40, 80):
            for dw in (0, 10, 50, 100):
                assert 0 <= get_proc_chance_per_swing(delay, True, dw, 255) <= 1

    def test_check_proc(self) -> None:
        assert check_proc(0, Seq()) is False
        assert check_proc(0.1, Seq(0.05)) is True
        assert check_proc(0.1, Seq(0.5)) is False


class TestAttackerNumbers:
    def test_str_bonus(self) -> None:
        assert str_offense_bonus(255) == 120
        assert str_offense_bonus(75) == 0
        assert str_offense_bonus(74) == 0

    def test_displayed_attack(self) -> None:
        assert displayed_attack(372, 511) == 1186

    def test_clamp_skill(self) -> None:
        assert clamp_skill(None) == 252
        assert clamp_skill(300) == 255
        assert clamp_skill(-5) == 0


class TestSpecialAttackNumbers:
    def test_backstab_base(self) -> None:
        assert backstab_base_damage(225, 0, 10) == 65

    def test_backstab_mod_capped(self) -> None:
        """225 * 1.2 = 270, capped to 255."""
        assert backstab_base_damage(225, 20, 10) == backstab_base_damage(255, 0, 10)
        assert backstab_base_damage(225, 20, 10) > backstab_base_damage(225, 0, 10)

    def test_backstab_min_hit(self) -> None:
        assert backstab_min_hit(60) == 120
        assert backstab_min_hit(65) == 130
        assert backstab_min_hit(55) == 82
        assert backstab_min_hit(50) == 50

    def test_kick_min_hit(self) -> None:
        assert kick_min_hit(60) == 48
