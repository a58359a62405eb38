"""
Unit tests for the Gemini text, vision and embedding helpers.
"""

from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest

from core.config import Settings
from core.exceptions import ConfigurationError, ExternalServiceError
from services.gemini_text import GeminiTextService, extract_json_object, split_tags


@pytest.fixture
def service():
    with patch("services.gemini_text.genai") as mock_genai:
        mock_genai.Client.return_value = MagicMock()
        svc = GeminiTextService(settings=Settings(gemini_api_key="test-key"))
    return svc


def reply(text: str | None):
    return SimpleNamespace(text=text)


class TestParsingHelpers:
    def test_extract_plain_json(self):
        assert extract_json_object('{"a": 1}') == {"a": 1}

    def test_extract_from_code_fence(self):
        text = 'Sure!\n```json\n{"enPrompt": "a cat", "tags": "x"}\n```\nDone.'
        assert extract_json_object(text) == {"enPrompt": "a cat", "tags": "x"}

    def test_extract_none_when_missing(self):
        assert extract_json_object("no json here") is None
        assert extract_json_object("{broken") is None
        assert extract_json_object("} backwards {") is None

    def test_extract_rejects_non_object(self):
        assert extract_json_object("[1, 2]") is None

    def test_split_tags(self):
        assert split_tags("風景, 日落 ,,夜景") == ["風景", "日落", "夜景"]
        assert split_tags(["a", " b ", ""]) == ["a", "b"]
        assert split_tags(None) == []


class TestGeminiTextService:
    def test_requires_api_key(self):
        with pytest.raises(ConfigurationError):
            GeminiTextService(settings=Settings(gemini_api_key=None))

    @pytest.mark.asyncio
    async def test_analyze_prompt(self, service):
        service._client.models.generate_content.return_value = reply(
            '{"enPrompt": "a cat on a roof", "zhPrompt": "屋頂上的貓", "tags": "貓, 屋頂"}'
        )

        analysis = await service.analyze_prompt("屋頂上的貓")

        assert analysis.analyzed is True
        assert analysis.en_prompt == "a cat on a roof"
        assert analysis.zh_prompt == "屋頂上的貓"
        assert analysis.tags == ["貓", "屋頂"]

    @pytest.mark.asyncio
    async def test_analyze_prompt_falls_back_on_error(self, service):
        service._client.models.generate_content.side_effect = Exception("quota exceeded")

        analysis = await service.analyze_prompt("a cat")

        assert analysis.analyzed is False
        assert analysis.en_prompt == "a cat"
        assert analysis.tags == []

    @pytest.mark.asyncio
    async def test_analyze_prompt_falls_back_on_bad_json(self, service):
        service._client.models.generate_content.return_value = reply("not json")

        analysis = await service.analyze_prompt("a cat")

        assert analysis.en_prompt == "a cat"
        assert analysis.analyzed is False

    @pytest.mark.asyncio
    async def test_enhance_prompt(self, service):
        service._client.models.generate_content.return_value = reply(
            '{"enhanced": "A majestic cat", "enhancedZH": "威嚴的貓", '
            '"additions": {"lighting": "rim light"}, "promptScore": {"before": 3, "after": 9}, '
            '"tags": ["cat", "portrait"]}'
        )

        enhanced = await service.enhance_prompt("a cat")

        assert enhanced.enhanced == "A majestic cat"
        assert enhanced.enhanced_zh == "威嚴的貓"
        assert enhanced.additions == {"lighting": "rim light"}
        assert enhanced.prompt_score["after"] == 9
        assert enhanced.tags == ["cat", "portrait"]

    @pytest.mark.asyncio
    async def test_enhance_prompt_plain_text(self, service):
        service._client.models.generate_content.return_value = reply("  A majestic cat  ")

        enhanced = await service.enhance_prompt("a cat")

        assert enhanced.enhanced == "A majestic cat"

    @pytest.mark.asyncio
    async def test_enhance_prompt_raises_on_api_error(self, service):
        service._client.models.generate_content.side_effect = Exception("boom")

        with pytest.raises(ExternalServiceError):
            await service.enhance_prompt("a cat")

    @pytest.mark.asyncio
    async def test_translate_to_english(self, service):
        service._client.models.generate_content.return_value = reply(
            '{"translated": "a cat", "enhanced": "a cute cat, bokeh", "keywords": ["cat"]}'
        )

        result = await service.translate("一隻貓", target_lang="en")

        assert result.translated == "a cat"
        assert result.enhanced == "a cute cat, bokeh"
        assert result.keywords == ["cat"]
        contents = service._client.models.generate_content.call_args.kwargs["contents"]
        assert "Chinese input" in contents
        assert "bokeh" in contents

    @pytest.mark.asyncio
    async def test_translate_to_chinese(self, service):
        service._client.models.generate_content.return_value = reply(
            '{"translated": "一隻貓", "preservedTerms": ["bokeh"], "summary": "貓"}'
        )

        result = await service.translate("a cat, bokeh", target_lang="zh-TW")

        assert result.translated == "一隻貓"
        assert result.enhanced == "一隻貓"
        assert result.keywords == ["bokeh"]
        assert result.summary == "貓"

    @pytest.mark.asyncio
    async def test_suggest_tags(self, service, png_bytes):
        service._client.models.generate_content.return_value = reply("貓, 可愛, 動漫")

        tags = await service.suggest_tags(png_bytes)

        assert tags == ["貓", "可愛", "動漫"]

    @pytest.mark.asyncio
    async def test_suggest_tags_empty_reply(self, service, png_bytes):
        service._client.models.generate_content.return_value = reply(None)

        with pytest.raises(ExternalServiceError):
            await service.suggest_tags(png_bytes)

    @pytest.mark.asyncio
    async def test_describe_image(self, service, png_bytes):
        service._client.models.generate_content.return_value = reply(
            '{"promptEN": "a red square on white", "promptZH": "白底紅方塊", '
            '"style": "minimalist", "mood": "calm", "tags": ["red", "square"], '
            '"category": "abstract"}'
        )

        result = await service.describe_image(png_bytes, mime_type="image/png")

        assert result.prompt_en == "a red square on white"
        assert result.prompt_zh == "白底紅方塊"
        assert result.tags == ["red", "square"]
        assert (result.style, result.mood, result.category) == ("minimalist", "calm", "abstract")
        kwargs = service._client.models.generate_content.call_args.kwargs
        assert kwargs["config"].response_mime_type == "application/json"

    @pytest.mark.asyncio
    async def test_describe_image_plain_text(self, service, png_bytes):
        service._client.models.generate_content.return_value = reply("  a red square  ")

        result = await service.describe_image(png_bytes)

        assert result.prompt_en == "a red square"
        assert result.tags == ["Imported", "Auto-Caption"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("text", [None, '{"promptEN": ""}'])
    async def test_describe_image_empty(self, service, png_bytes, text):
        service._client.models.generate_content.return_value = reply(text)

        with pytest.raises(ExternalServiceError):
            await service.describe_image(png_bytes)

    @pytest.mark.asyncio
    async def test_embed(self, service):
        service._client.models.embed_content.return_value = SimpleNamespace(
            embeddings=[SimpleNamespace(values=[0.1, 0.2, 0.3])]
        )

        assert await service.embed("a cat") == [0.1, 0.2, 0.3]

    @pytest.mark.asyncio
    async def test_embed_empty(self, service):
        service._client.models.embed_content.return_value = SimpleNamespace(embeddings=[])

        with pytest.raises(ExternalServiceError):
            await service.embed("a cat")
