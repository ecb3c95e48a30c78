import pytest

from technician_access import ActionSuggestionService

from conftest import FakeAnthropic


class TestSuggestActions:

    @pytest.mark.asyncio
    async def test_known_actions_are_kept_in_order(self):
        client = FakeAnthropic(
            'Here you go: {"actions": ["test_connection", "install_camera", "format_disk"], '
            '"reasoning": "New cameras must be mounted and checked"}'
        )
        service = ActionSuggestionService(anthropic_client=client, model="test-model")

        result = await service.suggest_actions("Install 5 cameras in the lobby")

        assert result["actions"] == ["install_camera", "test_connection"]
        assert result["reasoning"] == "New cameras must be mounted and checked"
        assert result["original_reason"] == "Install 5 cameras in the lobby"
        assert client.calls[0]["model"] == "test-model"
        assert "Install 5 cameras in the lobby" in client.calls[0]["messages"][0]["content"]

    @pytest.mark.asyncio
    async def test_reply_without_json(self):
        service = ActionSuggestionService(anthropic_client=FakeAnthropic("I cannot help with that."))

        result = await service.suggest_actions("Install 5 cameras")

        assert result["actions"] == []
        assert result["reasoning"] == "Failed to parse LLM response"

    @pytest.mark.asyncio
    async def test_reply_with_broken_json(self):
        service = ActionSuggestionService(anthropic_client=FakeAnthropic('{"actions": [install_camera}'))

        result = await service.suggest_actions("Install 5 cameras")

        assert result["actions"] == []
        assert result["reasoning"] == "Invalid JSON in LLM response"
