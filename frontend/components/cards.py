"""
Profile card markup for the swipe deck.

Everything shown here comes from other users, so every value is escaped
before it goes into HTML rendered with `unsafe_allow_html`.
"""

import html

import streamlit as st

DEFAULT_BIO = "Food lover looking for someone to share amazing meals with!"


def tag_html(label: str, icon: str = "") -> str:
    text = f"{icon} {label}" if icon else label
    return f"<span class='tag'>{html.escape(text)}</span>"


def profile_card_html(profile: dict) -> str:
    name = html.escape(profile.get("full_name") or profile["id"])
    age = f", {int(profile['age'])}" if profile.get("age") else ""
    location = html.escape(profile.get("location", ""))
    bio = html.escape(profile.get("bio") or DEFAULT_BIO)
    cuisines = "".join(tag_html(c) for c in profile.get("favorite_cuisines", [])[:3])
    styles = "".join(tag_html(s) for s in profile.get("dining_style", []))
    return (
        "<div class='profile-card'>"
        f"<h2 style='margin:0'>{name}{age}</h2>"
        f"<p style='color:#8a6a5a;margin:2px 0 10px'>📍 {location}</p>"
        f"<p>{bio}</p>"
        f"<p style='margin:6px 0 2px'><b>Favorite Cuisines</b></p>{cuisines}"
        f"<p style='margin:6px 0 2px'><b>Dining Style</b></p>{styles}"
        "</div>"
    )


def profile_card(profile: dict) -> None:
    """Render a candidate's photo and card."""
    if profile.get("avatar_url"):
        st.image(profile["avatar_url"], use_container_width=True)
    st.markdown(profile_card_html(profile), unsafe_allow_html=True)
