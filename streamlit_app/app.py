"""Progression dashboard — Streamlit front end over the progression engine.

Run with:
    streamlit run streamlit_app/app.py

The database location comes from PROGRESSION_DB_PATH (see scheduler/config.py).
"""

from __future__ import annotations

import sys
from pathlib import Path

import streamlit as st

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from progression_engine import (  # noqa: E402
    InsufficientFunds,
    InvalidSessionState,
    NotFound,
    ProgressionEngine,
    ProgressionError,
    ValidationError,
)
from progression_engine.models.enums import MuscleGroup  # noqa: E402
from progression_engine.models.profile import Profile  # noqa: E402
from scheduler.nightly import open_store  # noqa: E402

from helpers import (  # noqa: E402
    ACTIVITY_LEVELS,
    DAY_NAMES,
    DIFFICULTY_COLORS,
    FITNESS_LEVELS,
    FOCUS_AREAS,
    ITEM_ICONS,
    WORKOUT_REASONS,
    finish_tracked_session,
    format_exp,
    inventory_frame,
    profile_fields_from_form,
    rank_banner_html,
    session_history_frame,
)

# ---------------------------------------------------------------------------
# Page config
# ---------------------------------------------------------------------------

st.set_page_config(
    page_title="Level Up Training",
    page_icon="⚔️",
    layout="wide",
)


# ---------------------------------------------------------------------------
# Cached engine
# ---------------------------------------------------------------------------


@st.cache_resource
def get_engine() -> ProgressionEngine:
    return ProgressionEngine(open_store())


engine = get_engine()
store = engine.store

# ---------------------------------------------------------------------------
# Sidebar: user selection
# ---------------------------------------------------------------------------

st.sidebar.title("Hunter")
user_id = st.sidebar.text_input("User ID", value=st.session_state.get("user_id", "player-1"))
st.session_state["user_id"] = user_id

try:
    profile = store.get_profile(user_id)
except NotFound:
    profile = None
except ProgressionError as exc:
    st.error(f"Could not load profile: {exc}")
    st.stop()


# ---------------------------------------------------------------------------
# Onboarding / profile editing
# ---------------------------------------------------------------------------


def _profile_form(existing: Profile | None) -> None:
    with st.form("profile_form"):
        reason = st.selectbox("Why do you work out?", WORKOUT_REASONS)
        focus = st.selectbox(
            "Focus area",
            FOCUS_AREAS,
            index=FOCUS_AREAS.index(existing.focus_area)
            if existing and existing.focus_area in FOCUS_AREAS
            else 0,
        )
        level = st.selectbox(
            "Fitness level",
            FITNESS_LEVELS,
            index=FITNESS_LEVELS.index(existing.fitness_level)
            if existing and existing.fitness_level in FITNESS_LEVELS
            else 0,
        )
        activity = st.selectbox("Activity level", ACTIVITY_LEVELS)
        c1, c2, c3, c4 = st.columns(4)
        age = c1.text_input("Age", value=str(existing.age or "") if existing else "")
        height = c2.text_input("Height (cm)", value=str(existing.height or "") if existing else "")
        weight = c3.text_input("Weight (kg)", value=str(existing.weight or "") if existing else "")
        target = c4.text_input(
            "Target weight (kg)", value=str(existing.target_weight or "") if existing else ""
        )
        days = st.multiselect(
            "Workout days", DAY_NAMES, default=list(existing.workout_days) if existing else []
        )
        regenerate = st.checkbox("Generate a new plan", value=existing is None)
        submitted = st.form_submit_button("Save")

    if not submitted:
        return

    fields = profile_fields_from_form({
        "workout_reason": reason,
        "focus_area": focus,
        "fitness_level": level,
        "activity_level": activity,
        "age": age,
        "height": height,
        "weight": weight,
        "target_weight": target,
        "workout_days": days,
    })
    try:
        if existing is None:
            store.add_profile(Profile(user_id=user_id))
        store.update_profile(user_id, fields)
        if regenerate:
            plan = engine.generate_plan(user_id)
            if plan.is_empty:
                st.warning("No exercises matched your focus area; your plan is empty.")
        st.success("Profile saved.")
        st.rerun()
    except ProgressionError as exc:
        st.error(str(exc))


if profile is None or not profile.focus_area:
    st.title("Welcome, hunter")
    st.write("Tell us about yourself to receive your first training plan.")
    _profile_form(profile)
    st.stop()


# ---------------------------------------------------------------------------
# Header
# ---------------------------------------------------------------------------

status = engine.status(user_id)
st.markdown(rank_banner_html(status.profile), unsafe_allow_html=True)
st.progress(status.progress_fraction, text=format_exp(status.profile))

tab_quest, tab_classic, tab_shop, tab_explore, tab_profile = st.tabs(
    ["Daily Quest", "Classic Mode", "Shop", "Explore", "Profile"]
)

# ---------------------------------------------------------------------------
# Daily quest: plan + session runner
# ---------------------------------------------------------------------------

with tab_quest:
    plan = engine.active_plan(user_id)
    today_session = engine.todays_session(user_id)
    if today_session is not None and today_session.is_completed:
        st.success(f"Today's quest completed: +{today_session.exp_earned} EXP")

    if plan is None:
        st.info("No active plan.")
        if st.button("Generate plan"):
            try:
                engine.generate_plan(user_id)
                st.rerun()
            except ValidationError as exc:
                st.error(str(exc))
    elif plan.is_empty:
        st.warning("Your plan has no exercises. Try another focus area.")
    else:
        session_id = st.session_state.get("session_id")
        if session_id is None:
            for item in plan.ordered_items():
                st.markdown(f"**{item.exercise.name}** — {item.sets} x {item.reps}")
            if st.button("Start workout"):
                try:
                    st.session_state["session_id"] = engine.start_workout(user_id).id
                    st.rerun()
                except ProgressionError as exc:
                    st.error(str(exc))
        else:
            checked = []
            for item in plan.ordered_items():
                color = DIFFICULTY_COLORS[item.exercise.difficulty]
                label = f"{item.exercise.name} — {item.sets} x {item.reps}"
                if st.checkbox(label, key=f"chk_{session_id}_{item.id}"):
                    checked.append(item.id)
                st.markdown(
                    f'<small style="color:{color};">{item.exercise.difficulty.value}</small>',
                    unsafe_allow_html=True,
                )
            if st.button("Finish workout"):
                try:
                    outcome = finish_tracked_session(engine, st.session_state, checked)
                except (InvalidSessionState, NotFound):
                    st.session_state["flash_warning"] = "That workout can no longer be finished."
                    st.rerun()
                except ProgressionError as exc:
                    st.error(f"Could not finish workout, please retry: {exc}")
                else:
                    msg = f"+{outcome.exp_earned} EXP"
                    if outcome.level.leveled_up:
                        msg += f" — LEVEL UP! You are now level {outcome.profile.level}"
                    st.session_state["flash"] = msg
                    st.rerun()

    if "flash_warning" in st.session_state:
        st.warning(st.session_state.pop("flash_warning"))

    if "flash" in st.session_state:
        st.balloons()
        st.success(st.session_state.pop("flash"))

    st.subheader("History")
    st.dataframe(session_history_frame(store.list_sessions(user_id)), hide_index=True)

# ---------------------------------------------------------------------------
# Classic mode: free exercise logging
# ---------------------------------------------------------------------------

with tab_classic:
    exercises = engine.browse_exercises()
    if not exercises:
        st.info("The exercise catalog is empty.")
    else:
        names = [ex.name for ex in exercises]
        choice = st.selectbox("Exercise", names)
        c1, c2 = st.columns(2)
        sets = c1.number_input("Sets", 1, 20, 3)
        reps = c2.number_input("Reps", 1, 100, 10)
        if st.button("Log exercise"):
            exercise = exercises[names.index(choice)]
            try:
                result = engine.log_exercise(user_id, exercise, int(sets), int(reps))
                st.success(f"+{result.exp_earned} EXP")
            except ProgressionError as exc:
                st.error(str(exc))

# ---------------------------------------------------------------------------
# Shop
# ---------------------------------------------------------------------------

with tab_shop:
    st.metric("Balance", f"{status.profile.exp} EXP")
    for item in engine.shop.list_items():
        c1, c2 = st.columns([4, 1])
        c1.markdown(
            f"{ITEM_ICONS.get(item.type, '')} **{item.name}** — {item.cost_exp} EXP  \n{item.description}"
        )
        if c2.button("Buy", key=f"buy_{item.id}", disabled=status.profile.exp < item.cost_exp):
            try:
                receipt = engine.purchase(user_id, item.id)
                st.success(f"You purchased {receipt.item.name}!")
                st.rerun()
            except InsufficientFunds:
                st.error("You do not have enough EXP to buy this item.")
            except ProgressionError as exc:
                st.error(str(exc))

# ---------------------------------------------------------------------------
# Explore: catalog browsing
# ---------------------------------------------------------------------------

with tab_explore:
    groups = ["All"] + [g.value for g in MuscleGroup]
    selected = st.selectbox("Muscle group", groups)
    query = st.text_input("Search")
    group = None if selected == "All" else MuscleGroup(selected)
    for ex in engine.browse_exercises(group, query):
        st.markdown(f"**{ex.name}** · {ex.muscle_group.value} · {ex.difficulty.value}")

# ---------------------------------------------------------------------------
# Profile & inventory
# ---------------------------------------------------------------------------

with tab_profile:
    c1, c2, c3 = st.columns(3)
    c1.metric("Level", status.profile.level)
    c2.metric("Streak", status.profile.streak_current)
    c3.metric("Streak freezes", status.profile.streak_freeze_count)
    st.subheader("Inventory")
    st.dataframe(inventory_frame(engine.inventory(user_id)), hide_index=True)
    with st.expander("Edit profile"):
        _profile_form(status.profile)
