"""Swipe-deck card markup: user-supplied text never reaches the page as HTML."""

from frontend.components.cards import DEFAULT_BIO, profile_card_html, tag_html


def _profile(**overrides) -> dict:
    profile = {
        "id": "mallory",
        "full_name": "Mallory",
        "age": 33,
        "bio": "Tacos",
        "location": "Austin",
        "favorite_cuisines": ["Mexican", "Thai", "Korean", "Greek"],
        "dining_style": ["Street Food"],
    }
    profile.update(overrides)
    return profile


class TestProfileCard:

    def test_user_text_is_escaped(self):
        markup = profile_card_html(_profile(
            full_name="<script>alert(1)</script>",
            bio="<img src=x onerror=alert(1)>",
            location="A&B <b>",
            favorite_cuisines=["<i>Thai</i>"],
            dining_style=["'quoted'"],
        ))

        assert "<script>" not in markup
        assert "<img" not in markup
        assert "<i>Thai" not in markup
        assert "&lt;script&gt;alert(1)&lt;/script&gt;" in markup
        assert "A&amp;B &lt;b&gt;" in markup
        assert "&#x27;quoted&#x27;" in markup

    def test_card_content(self):
        markup = profile_card_html(_profile())

        assert "Mallory, 33" in markup
        assert markup.count("class='tag'") == 4       # three cuisines plus one style
        assert "Greek" not in markup

    def test_fallbacks(self):
        markup = profile_card_html(_profile(full_name="", bio="", age=None))

        assert "mallory</h2>" in markup
        assert DEFAULT_BIO in markup

    def test_tag_escapes_label(self):
        assert tag_html("<u>bob</u>", icon="🍴") == "<span class='tag'>🍴 &lt;u&gt;bob&lt;/u&gt;</span>"
