"""Streamlit DPS simulator UI.

Run with: PYTHONPATH=. streamlit run ui/app.py
"""

from __future__ import annotations

import streamlit as st

from eqsim import (
    FightConfig,
    FightError,
    RangedFightConfig,
    Target,
    Weapon,
    format_ranged_report,
    format_report,
    run_batch,
    run_fight,
    run_ranged_fight,
)
from eqsim.data.skill_caps import SKILLS, get_weapon_skill_cap

CLASSES = ("warrior", "monk", "rogue", "ranger", "bard", "beastlord", "paladin", "shadowknight", "")
ELEMENTS = ("", "fire", "cold", "poison", "disease", "magic")
RESISTS = ("fr", "cr", "pr", "dr", "mr")


def class_label(class_id: str) -> str:
    return class_id.capitalize() if class_id else "Other"


def build_weapon(config: dict) -> Weapon | None:
    """Build a Weapon from widget values; None when no damage was entered."""
    if not config.get("damage"):
        return None
    return Weapon(
        damage=config["damage"],
        delay=config.get("delay"),
        is_2h=config.get("is_2h", False),
        proc_spell=config.get("proc_spell") or None,
        proc_spell_damage=config.get("proc_spell_damage", 0),
        elem_type=config.get("elem_type") or None,
        elem_damage=config.get("elem_damage", 0),
        name=config.get("name", ""),
    )


def build_target(config: dict) -> Target:
    return Target(
        mob_level=config.get("mob_level", 60),
        target_ac=config.get("target_ac"),
        **{r: config.get(r, 35) for r in RESISTS},
    )


def build_fight_config(config: dict) -> FightConfig:
    """Build a melee FightConfig from the sidebar config dict.

    Keys not known to FightConfig are ignored, so the dict can carry
    UI-only values (like the number of batch runs).
    """
    fields = {k: v for k, v in config.get("fighter", {}).items() if k in FightConfig.__dataclass_fields__}
    return FightConfig(
        weapon1=build_weapon(config["weapon1"]),
        weapon2=build_weapon(config.get("weapon2", {})),
        target=build_target(config.get("target", {})),
        **fields,
    )


def build_ranged_config(config: dict) -> RangedFightConfig:
    fields = {k: v for k, v in config.get("fighter", {}).items() if k in RangedFightConfig.__dataclass_fields__}
    return RangedFightConfig(
        ranged_weapon=build_weapon(config["ranged_weapon"]),
        arrow=build_weapon(config.get("arrow", {})),
        target=build_target(config.get("target", {})),
        **fields,
    )


def skill_cap_caption(class_id: str, skill: str, level: int) -> str:
    cap = get_weapon_skill_cap(class_id, skill, level)
    if cap <= 0:
        return f"{class_label(class_id)} can't use {skill}"
    return f"{class_label(class_id)} {skill} cap at level {level}: {cap}"


def weapon_inputs(label: str, key: str, ranged: bool = False, arrow: bool = False) -> dict:
    """Render inputs for one weapon and return its config dict."""
    st.sidebar.subheader(label)
    config: dict = {"name": label}
    config["damage"] = st.sidebar.number_input("Damage", min_value=0, value=0 if key == "weapon2" else 10, key=f"{key}_damage")
    if not arrow:
        config["delay"] = st.sidebar.number_input("Delay", min_value=1, value=28, key=f"{key}_delay")
    if not ranged and not arrow:
        config["is_2h"] = st.sidebar.checkbox("Two-handed", key=f"{key}_2h")
    with st.sidebar.expander("Proc / elemental"):
        if not arrow:
            config["proc_spell"] = st.text_input("Proc spell", key=f"{key}_proc")
            config["proc_spell_damage"] = st.number_input("Proc damage", min_value=0, key=f"{key}_proc_dmg")
        config["elem_type"] = st.selectbox("Element", ELEMENTS, key=f"{key}_elem")
        config["elem_damage"] = st.number_input("Elemental damage", min_value=0, key=f"{key}_elem_dmg")
    return config


def fighter_inputs(ranged: bool) -> dict:
    st.sidebar.subheader("Fighter")
    fighter: dict = {}
    if not ranged:
        fighter["class_id"] = st.sidebar.selectbox("Class", CLASSES, format_func=class_label, key="class_id")
    fighter["level"] = st.sidebar.slider("Level", 1, 65, 60, key="level")
    skill = st.sidebar.selectbox("Weapon skill", SKILLS, key="weapon_skill")
    st.sidebar.caption(skill_cap_caption(fighter.get("class_id", "ranger"), skill, fighter["level"]))
    fighter["strength"] = st.sidebar.number_input("STR", 0, 400, 255, key="str")
    fighter["dex"] = st.sidebar.number_input("DEX", 0, 400, 255, key="dex")
    fighter["offense_skill"] = st.sidebar.number_input("Offense skill", 0, 255, 252, key="offense")
    fighter["haste_percent"] = st.sidebar.number_input("Haste %", 0, 200, 0, key="haste")
    fighter["worn_attack"] = st.sidebar.number_input("Worn ATK", 0, 500, 0, key="worn_atk")
    fighter["spell_attack"] = st.sidebar.number_input("Spell ATK", 0, 500, 0, key="spell_atk")
    fighter["crit_chance_mult"] = st.sidebar.number_input("AA crit chance %", 0, 500, 0, key="crit_mult")
    if ranged:
        fighter["archery_mastery"] = st.sidebar.slider("Archery Mastery", 1, 3, 2, key="mastery")
        fighter["mob_stationary"] = st.sidebar.checkbox("Target stationary", key="stationary")
        fighter["use_walled_mob_penalty"] = st.sidebar.checkbox("Walled mob penalty", key="walled")
        return fighter

    with st.sidebar.expander("Skills"):
        fighter["double_attack_skill"] = st.number_input("Double attack", 0, 255, 0, key="da")
        fighter["dual_wield_skill"] = st.number_input("Dual wield", 0, 255, 0, key="dw")
        fighter["ambidexterity"] = st.number_input("Ambidexterity", 0, 100, 0, key="ambi")
        fighter["to_hit_bonus"] = st.number_input("To-hit bonus", 0, 100, 0, key="to_hit_bonus")
        fighter["backstab_skill"] = st.number_input("Backstab", 0, 255, 225, key="backstab")
        fighter["backstab_mod_percent"] = st.number_input("Backstab mod %", 0, 100, 0, key="backstab_mod")
    fighter["from_behind"] = st.sidebar.checkbox("Attack from behind", key="behind")
    fighter["special_attacks"] = st.sidebar.checkbox("Use special attacks", key="specials")
    fighter["fistweaving"] = st.sidebar.checkbox("Fistweaving (monk 2H)", key="fistweaving")
    return fighter


def target_inputs() -> dict:
    st.sidebar.subheader("Target")
    target: dict = {
        "mob_level": st.sidebar.slider("Mob level", 1, 70, 60, key="mob_level"),
        "target_ac": st.sidebar.number_input("Mob AC", 0, 2000, 300, key="mob_ac"),
    }
    with st.sidebar.expander("Resists"):
        for r in RESISTS:
            target[r] = st.number_input(r.upper(), 0, 500, 35, key=f"resist_{r}")
    return target


def show_summary(report) -> None:
    cols = st.columns(3)
    cols[0].metric("DPS", f"{report.dps:.2f}")
    cols[1].metric("Total damage", report.total_damage)
    cols[2].metric("Critical hits", report.crit_hits)


def main() -> None:
    st.set_page_config(page_title="DPS Simulator", layout="wide")
    st.title("DPS Simulator")

    mode = st.sidebar.radio("Mode", ("Melee", "Ranged"), horizontal=True)
    ranged = mode == "Ranged"
    config: dict = {}
    if ranged:
        config["ranged_weapon"] = weapon_inputs("Bow", "bow", ranged=True)
        config["arrow"] = weapon_inputs("Arrow", "arrow", arrow=True)
    else:
        config["weapon1"] = weapon_inputs("Main hand", "weapon1")
        config["weapon2"] = weapon_inputs("Off hand", "weapon2")
    st.sidebar.divider()
    config["fighter"] = fighter_inputs(ranged)
    st.sidebar.divider()
    config["target"] = target_inputs()

    st.sidebar.divider()
    duration = st.sidebar.number_input("Fight length (s)", 1, 3600, 60, key="duration")
    seed = st.sidebar.number_input("Seed (0 = random)", 0, 2**31 - 2, 0, key="seed")
    runs = st.sidebar.slider("Runs to average", 1, 200, 1, key="runs")
    config["fighter"].update(fight_duration_sec=duration, seed=seed or None)
    fight_clicked = st.sidebar.button("Fight!", type="primary")

    if not fight_clicked:
        return

    fight_config = build_ranged_config(config) if ranged else build_fight_config(config)
    report = run_ranged_fight(fight_config) if ranged else run_fight(fight_config)
    if isinstance(report, FightError):
        st.error(report.error)
        return

    show_summary(report)
    if runs > 1:
        batch = run_batch(fight_config, runs)
        st.caption(
            f"{batch.runs} runs: mean {batch.mean_dps:.2f} DPS "
            f"(min {batch.min_dps:.2f}, max {batch.max_dps:.2f}, sd {batch.stdev_dps:.2f})"
        )

    st.subheader("Combat Report")
    if ranged:
        st.code(format_ranged_report(report))
    else:
        st.code(format_report(report, config["weapon1"]["name"], config["weapon2"]["name"]))


if __name__ == "__main__":
    main()
