"""
Unit tests for the master prompt filter.
"""

import pytest

from services.prompt_filter import (
    QUALITY_SUFFIX_BASE,
    REASONING_PREFIX,
    RENDER_3D_SUFFIX,
    SCENE_KEYWORDS,
    SCENE_PROFILES,
    EngineMode,
    SceneCategory,
    analyze,
    classify_scene,
    compose,
    compose_parts,
    engine_mode_for,
    get_profile,
    get_quality_suffix,
    strip_conflicts,
)


class TestClassifyScene:
    """Tests for keyword-based scene classification."""

    @pytest.mark.parametrize(
        "prompt,expected",
        [
            ("a diamond ring on velvet", SceneCategory.MACRO),
            ("headshot of a smiling woman", SceneCategory.PORTRAIT),
            ("a man standing in a red outfit", SceneCategory.FULL_BODY),
            ("a brutalist building at dusk", SceneCategory.ARCHITECTURE),
            ("snowy mountain panorama", SceneCategory.LANDSCAPE),
            ("a skateboarder mid jump", SceneCategory.ACTION),
            ("a bowl of ramen, japanese cuisine", SceneCategory.FOOD),
            ("a lion resting in tall grass", SceneCategory.ANIMAL),
            ("isometric game asset of a tavern", SceneCategory.RENDER_3D),
            ("blue sky", SceneCategory.DEFAULT),
        ],
    )
    def test_categories(self, prompt, expected):
        assert classify_scene(prompt) == expected

    def test_case_insensitive(self):
        assert classify_scene("PORTRAIT OF AN OLD SAILOR") == SceneCategory.PORTRAIT

    def test_keyword_table_order(self):
        assert [category for category, _ in SCENE_KEYWORDS] == [
            SceneCategory.MACRO,
            SceneCategory.PORTRAIT,
            SceneCategory.FULL_BODY,
            SceneCategory.ARCHITECTURE,
            SceneCategory.LANDSCAPE,
            SceneCategory.ACTION,
            SceneCategory.FOOD,
            SceneCategory.ANIMAL,
            SceneCategory.RENDER_3D,
        ]

    @pytest.mark.parametrize(
        "prompt,expected",
        [
            ("close-up of a face", SceneCategory.MACRO),
            ("portrait of a model", SceneCategory.PORTRAIT),
            ("a model standing in a building", SceneCategory.FULL_BODY),
            ("a building on a mountain", SceneCategory.ARCHITECTURE),
            ("a bird flying over the ocean", SceneCategory.LANDSCAPE),
            ("running with a coffee", SceneCategory.ACTION),
            ("a dog eating food", SceneCategory.FOOD),
            ("a cat, 3d render", SceneCategory.ANIMAL),
        ],
    )
    def test_adjacent_categories_resolve_to_earlier(self, prompt, expected):
        assert classify_scene(prompt) == expected

    def test_priority_order_wins(self):
        """Both portrait and 3D keywords match; portrait is checked first."""
        assert classify_scene("portrait of a knight, 3d render") == SceneCategory.PORTRAIT

    def test_macro_beats_everything(self):
        assert classify_scene("close-up of a cat's eye") == SceneCategory.MACRO

    def test_substring_match_not_tokenized(self):
        """"ring" inside "string" still selects the macro category."""
        assert classify_scene("a string quartet") == SceneCategory.MACRO

    def test_model_inside_longer_phrase(self):
        assert classify_scene("a supermodel on the runway") == SceneCategory.FULL_BODY

    def test_empty_prompt_is_default(self):
        assert classify_scene("") == SceneCategory.DEFAULT

    def test_non_string_rejected(self):
        with pytest.raises(TypeError):
            classify_scene(None)


class TestStripConflicts:
    """Tests for removal of conflicting camera jargon."""

    def test_removes_lens_segments(self):
        assert strip_conflicts("a watch on a table, 50mm, f/1.8") == "a watch on a table"

    def test_removes_segment_containing_word(self):
        result = strip_conflicts("a forest, shot on Kodak Portra, misty morning")
        assert "Kodak" not in result
        assert result.startswith("a forest")
        assert "misty morning" in result

    def test_case_insensitive(self):
        assert "LENS" not in strip_conflicts("a cat, WIDE LENS, sleeping")

    def test_unanchored_fragment_removes_whole_segment(self):
        """Any segment containing "f/" goes, even when it is not a camera setting."""
        assert strip_conflicts("a poster, ratio 1/f/2 art, bold colors").count("ratio") == 0

    def test_no_conflicts_unchanged(self):
        assert strip_conflicts("a red fox in the snow") == "a red fox in the snow"

    def test_only_conflicts_gives_empty(self):
        assert strip_conflicts("85mm lens, f/1.4 aperture") == ""

    def test_idempotent(self):
        prompt = "portrait, 85mm, , soft light, f/2, shot on film, ,"
        once = strip_conflicts(prompt)
        assert strip_conflicts(once) == once

    def test_collapses_repeated_commas(self):
        result = strip_conflicts("a, 35mm, b, f/2, c")
        assert ",," not in result.replace(" ", "")

    def test_non_string_rejected(self):
        with pytest.raises(TypeError):
            strip_conflicts(42)


class TestLookups:
    """Tests for profile, suffix and engine lookups."""

    def test_every_category_has_profile(self):
        for category in SceneCategory:
            assert get_profile(category) == SCENE_PROFILES[category]

    def test_unknown_category_falls_back(self):
        assert get_profile("underwater") == SCENE_PROFILES[SceneCategory.DEFAULT]
        assert get_quality_suffix("underwater") == get_quality_suffix(SceneCategory.DEFAULT)

    def test_render_suffix(self):
        assert get_quality_suffix(SceneCategory.RENDER_3D) == RENDER_3D_SUFFIX

    @pytest.mark.parametrize(
        "engine,mode",
        [
            ("flash", EngineMode.FAST),
            ("pro", EngineMode.FULL),
            ("imagen", EngineMode.FULL),
            ("FLASH", EngineMode.FAST),
            ("something-new", EngineMode.FULL),
        ],
    )
    def test_engine_modes(self, engine, mode):
        assert engine_mode_for(engine) == mode


class TestCompose:
    """Tests for final prompt composition."""

    def test_full_mode_macro_example(self):
        result = compose("a watch on a table, 50mm, f/1.8", "full")

        assert result.startswith(REASONING_PREFIX)
        assert "100mm Macro, f/2.8 aperture" in result
        assert "50mm" not in result
        assert result.endswith(".")

    def test_full_mode_part_order(self):
        profile = SCENE_PROFILES[SceneCategory.PORTRAIT]
        result = compose("portrait of an old sailor", EngineMode.FULL)

        positions = [
            result.index(REASONING_PREFIX),
            result.index("portrait of an old sailor"),
            result.index(profile.lens),
            result.index(profile.lighting),
            result.index(profile.style),
            result.index(QUALITY_SUFFIX_BASE),
            result.index(get_quality_suffix(SceneCategory.PORTRAIT)),
        ]
        assert positions == sorted(positions)

    def test_fast_mode_is_short(self):
        profile = SCENE_PROFILES[SceneCategory.FOOD]
        result = compose("a chocolate dessert", EngineMode.FAST)

        assert result == f"a chocolate dessert, {profile.style}, {QUALITY_SUFFIX_BASE}."
        assert REASONING_PREFIX not in result
        assert profile.lens not in result

    @pytest.mark.parametrize(
        "prompt",
        [
            "a diamond ring on velvet",
            "headshot of a smiling woman",
            "a man standing in a red outfit",
            "a brutalist building at dusk",
            "snowy mountain panorama",
            "a skateboarder mid jump",
            "a chocolate dessert",
            "a lion resting in tall grass",
            "isometric game asset of a tavern",
            "blue sky",
        ],
    )
    def test_full_contains_everything_fast_has(self, prompt):
        fast = compose(prompt, EngineMode.FAST)
        full = compose(prompt, EngineMode.FULL)
        profile = get_profile(classify_scene(prompt))

        for phrase in fast.rstrip(".").split(", "):
            assert phrase in full
        assert profile.lens in full
        assert profile.lighting in full

    def test_single_trailing_period(self):
        for prompt in ["a quiet lake.", "a quiet lake...", "a quiet lake"]:
            for mode in EngineMode:
                result = compose(prompt, mode)
                assert result.endswith(".")
                assert not result.endswith("..")

    def test_no_doubled_separators(self):
        result = compose("a dog, , running on the beach", EngineMode.FULL)
        assert ", ," not in result
        assert ".." not in result

    def test_empty_prompt_still_composes(self):
        result = compose("", EngineMode.FAST)
        assert result == f"{SCENE_PROFILES[SceneCategory.DEFAULT].style}, {QUALITY_SUFFIX_BASE}."

    def test_deterministic(self):
        assert compose("a red panda", "full") == compose("a red panda", "full")

    def test_unknown_mode_rejected(self):
        with pytest.raises(ValueError):
            compose("a red panda", "turbo")

    def test_compose_parts_uses_given_scene(self):
        result = compose_parts("a teapot", SceneCategory.RENDER_3D, EngineMode.FULL)
        assert RENDER_3D_SUFFIX in result


class TestAnalyze:
    """Tests for the preview result."""

    def test_intermediate_values(self):
        result = analyze("a watch on a table, 50mm, f/1.8", EngineMode.FULL)

        assert result.original == "a watch on a table, 50mm, f/1.8"
        assert result.scene == SceneCategory.MACRO
        assert result.cleaned == "a watch on a table"
        assert result.profile == SCENE_PROFILES[SceneCategory.MACRO]
        assert result.engine_mode == EngineMode.FULL
        assert result.composed == compose("a watch on a table, 50mm, f/1.8", EngineMode.FULL)

    def test_scene_uses_raw_prompt(self):
        """Classification sees the prompt before stripping, so "lens" still counts."""
        result = analyze("macro lens, a beetle", EngineMode.FAST)
        assert result.scene == SceneCategory.MACRO
        assert result.cleaned == "a beetle"
