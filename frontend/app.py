"""
frontend/app.py
═══════════════
FoodMatch — Streamlit Swipe UI
Run: streamlit run frontend/app.py

Talks to the FastAPI backend only; the swipe state lives in the backend
SwipeSession. Profile setup runs the OnboardingWizard locally and saves the
result with PUT /api/profiles/{user_id}.

Dependencies
────────────
  pip install streamlit requests
"""
from __future__ import annotations

import requests
import streamlit as st

from config.settings import get_settings
from frontend.components.cards import profile_card, tag_html
from models.onboarding import (
    CUISINE_OPTIONS,
    DIETARY_OPTIONS,
    DINING_STYLE_OPTIONS,
    OnboardingWizard,
    Step,
)

# ─────────────────────────────────────────────────────────────────────────────
#  Config
# ─────────────────────────────────────────────────────────────────────────────
API = get_settings().api_url

st.set_page_config(
    page_title="FoodMatch · Find your dining companion",
    page_icon="🍽️",
    layout="centered",
    initial_sidebar_state="expanded",
)

st.markdown(
    """
    <style>
    .profile-card { background:#fff7f2; border:1px solid #f3d9c9; border-radius:18px;
                    padding:24px 28px; box-shadow:0 8px 30px rgba(0,0,0,.08); }
    .tag { display:inline-block; background:#ffe9dc; border-radius:12px;
           padding:2px 10px; margin:2px; font-size:.8em; color:#8a4b2a; }
    </style>
    """,
    unsafe_allow_html=True,
)

# ─────────────────────────────────────────────────────────────────────────────
#  Session state bootstrap
# ─────────────────────────────────────────────────────────────────────────────
_DEFAULTS = {
    "user_id":   None,
    "wizard":    None,     # OnboardingWizard while setting up a profile
    "state":     None,     # last SessionState from the backend
    "matches":   [],       # other_user_ids seen in MatchFound events
    "liked":     0,
    "passed":    0,
}
for k, v in _DEFAULTS.items():
    if k not in st.session_state:
        st.session_state[k] = v

# ─────────────────────────────────────────────────────────────────────────────
#  API helpers
# ─────────────────────────────────────────────────────────────────────────────
def _api_ok() -> bool:
    try:
        return requests.get(f"{API}/health", timeout=3).status_code == 200
    except requests.RequestException:
        return False


def _profile_exists(user_id: str) -> bool:
    r = requests.get(f"{API}/api/profiles/{user_id}", timeout=5)
    return r.status_code == 200


def _save_profile(user_id: str, fields: dict) -> bool:
    r = requests.put(f"{API}/api/profiles/{user_id}", json=fields, timeout=5)
    if r.status_code != 200:
        st.error(f"Failed to save profile: {r.json().get('detail', r.text)}")
        return False
    return True


def _session_call(method: str, path: str = "", **payload) -> dict | None:
    """Call a /api/sessions endpoint; surfaces transient failures without losing the card."""
    user_id = st.session_state["user_id"]
    try:
        r = requests.request(
            method, f"{API}/api/sessions/{user_id}{path}", json=payload or None, timeout=10
        )
    except requests.RequestException as e:
        st.error(f"Backend unreachable: {e}")
        return None
    if r.status_code == 503:
        st.toast("Couldn't save that swipe — tap Retry.", icon="⚠️")
        return _session_call("GET")
    if r.status_code >= 400:
        st.error(r.json().get("detail", r.text))
        return None
    return r.json()


def _apply_state(state: dict | None) -> None:
    if state is None:
        return
    for event in state.get("events", []):
        kind = event["type"]
        if kind == "match_found":
            st.session_state["matches"].append(event["other_user_id"])
            st.toast("It's a match! 🎉", icon="🍽️")
        elif kind == "decision_made":
            st.session_state["liked" if event["liked"] else "passed"] += 1
    st.session_state["state"] = state


# ─────────────────────────────────────────────────────────────────────────────
#  Sidebar
# ─────────────────────────────────────────────────────────────────────────────
with st.sidebar:
    st.markdown("## 🍽️ FoodMatch")

    api_live = _api_ok()
    if api_live:
        st.success("🟢 Backend Online")
    else:
        st.error("🔴 Backend Offline")
        st.caption("Start: `uvicorn backend.main:app --reload`")
        st.stop()

    user_id = st.text_input("Your user id", value=st.session_state["user_id"] or "")
    if st.button("Sign in", type="primary", use_container_width=True) and user_id:
        st.session_state.update(user_id=user_id, state=None, matches=[], liked=0, passed=0)
        if _profile_exists(user_id):
            st.session_state["wizard"] = None
            _apply_state(_session_call("POST"))
        else:
            st.session_state["wizard"] = OnboardingWizard()
        st.rerun()

    if st.session_state["user_id"]:
        st.divider()
        c1, c2, c3 = st.columns(3)
        c1.metric("❤️ Liked", st.session_state["liked"])
        c2.metric("⏭ Passed", st.session_state["passed"])
        c3.metric("🎉 Matches", len(st.session_state["matches"]))
        for other in st.session_state["matches"]:
            st.markdown(tag_html(other, icon="🍴"), unsafe_allow_html=True)

if not st.session_state["user_id"]:
    st.info("Enter your user id in the sidebar to start.")
    st.stop()

# ─────────────────────────────────────────────────────────────────────────────
#  Profile setup wizard
# ─────────────────────────────────────────────────────────────────────────────
wizard: OnboardingWizard | None = st.session_state["wizard"]
if wizard is not None:
    if wizard.complete:
        wizard.reopen()     # a previous save failed
    st.header("Complete Your Profile")
    st.progress(min(wizard.step, Step.DIETARY) / Step.DIETARY, text=wizard.step.title)

    if wizard.step is Step.BASIC_INFO:
        wizard.update(
            full_name=st.text_input("Full Name", value=wizard.form.full_name),
            age=st.text_input("Age", value=wizard.form.age),
            location=st.text_input("Location", value=wizard.form.location),
            bio=st.text_area("Bio", value=wizard.form.bio),
            avatar_url=st.text_input("Photo URL", value=wizard.form.avatar_url),
        )
    else:
        field, options = {
            Step.CUISINES:     ("favorite_cuisines", CUISINE_OPTIONS),
            Step.DINING_STYLE: ("dining_style", DINING_STYLE_OPTIONS),
            Step.DIETARY:      ("dietary_restrictions", DIETARY_OPTIONS),
        }[wizard.step]
        chosen = st.multiselect(wizard.step.title, options, default=list(getattr(wizard.form, field)))
        wizard.update(**{field: tuple(chosen)})

    back_col, next_col = st.columns(2)
    if wizard.step is not Step.BASIC_INFO and back_col.button("Back"):
        wizard.back()
        st.rerun()
    if wizard.step is Step.DIETARY:
        if next_col.button("Complete Profile", type="primary", disabled=not wizard.can_proceed):
            if _save_profile(st.session_state["user_id"], wizard.submit()):
                st.session_state["wizard"] = None
                _apply_state(_session_call("POST"))
                st.rerun()
            else:
                wizard.reopen()
    elif next_col.button("Next", type="primary", disabled=not wizard.can_proceed):
        wizard.next()
        st.rerun()
    st.stop()

# ─────────────────────────────────────────────────────────────────────────────
#  Swipe deck
# ─────────────────────────────────────────────────────────────────────────────
state = st.session_state["state"]
if state is None:
    _apply_state(_session_call("GET"))
    state = st.session_state["state"]
if state is None:
    st.stop()

if state["exhausted"] or state["candidate"] is None:
    st.markdown("### No more profiles!")
    st.caption("You've seen all available profiles. Check back later for new matches!")
    if st.button("🔄 Refresh", type="primary"):
        _apply_state(_session_call("POST", "/refresh"))
        st.rerun()
    st.stop()

profile_card(state["candidate"])
st.markdown("<div style='height:12px'></div>", unsafe_allow_html=True)

pass_col, like_col, retry_col = st.columns(3)
if state["card_state"] == "resolved":
    # previous write failed; the decision is kept until it is saved
    if retry_col.button("↻ Retry", type="primary", use_container_width=True):
        _apply_state(_session_call("POST", "/retry"))
        st.rerun()
else:
    if pass_col.button("✕  Pass", use_container_width=True):
        _apply_state(_session_call("POST", "/decide", liked=False))
        st.rerun()
    if like_col.button("❤  Like", type="primary", use_container_width=True):
        _apply_state(_session_call("POST", "/decide", liked=True))
        st.rerun()
