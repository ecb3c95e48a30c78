"""
Action suggestion service for pre-filling a grant from its written reason.
"""

import json
from typing import Dict, List, Any

from anthropic import Anthropic

from .models import AccessAction


class ActionSuggestionService:
    """
    Suggest the allowed actions for a grant from the administrator's reason.

    This service uses an LLM to read a justification such as "Install 5
    cameras in the admin wing" and propose the minimal set of technician
    actions it calls for. The result is only a suggestion; the grant form
    still goes through normal validation.
    """

    SUGGESTION_PROMPT = """A field technician needs temporary access to a customer's video surveillance system.
Read the administrator's reason and choose the minimal set of actions the technician needs.

Reason: {reason}

Available actions:
- install_camera: physically install and register new cameras
- test_connection: ping cameras and check stream availability
- configure_onvif: change ONVIF/RTSP settings on a camera
- configure_network: change IP, VLAN or port settings
- view_live: watch live video from the cameras
- upload_evidence: upload photos or videos of the work done

Output a JSON object with:
{{
  "actions": ["action_id", ...],
  "reasoning": "brief explanation of why these actions are needed"
}}

Be minimal: only include actions strictly necessary for the work described.
Do not include view_live unless watching video is explicitly required."""

    def __init__(self, anthropic_client: Anthropic, model: str = "claude-sonnet-4-20250514"):
        """
        Initialize the action suggestion service.

        Args:
            anthropic_client: Configured Anthropic client
            model: Model to use for suggestions (default: claude-sonnet-4-20250514)
        """
        self.client = anthropic_client
        self.model = model

    async def suggest_actions(self, reason: str) -> Dict[str, Any]:
        """
        Suggest allowed actions for a grant reason.

        Args:
            reason: Free-text justification entered by the administrator

        Returns:
            Dictionary with suggested actions and reasoning:
            {
                "actions": [...],
                "reasoning": str,
                "original_reason": str
            }
        """
        response = self.client.messages.create(
            model=self.model,
            max_tokens=512,
            messages=[{
                "role": "user",
                "content": self.SUGGESTION_PROMPT.format(reason=reason)
            }]
        )

        text = response.content[0].text

        # Extract JSON from response
        start = text.find('{')
        end = text.rfind('}') + 1

        if start == -1 or end == 0:
            return {
                "actions": [],
                "reasoning": "Failed to parse LLM response",
                "original_reason": reason
            }

        try:
            data = json.loads(text[start:end])
        except json.JSONDecodeError:
            return {
                "actions": [],
                "reasoning": "Invalid JSON in LLM response",
                "original_reason": reason
            }

        return {
            "actions": self._known_actions(data.get("actions", [])),
            "reasoning": data.get("reasoning", ""),
            "original_reason": reason
        }

    def _known_actions(self, suggested: List[Any]) -> List[str]:
        """Keep members of the fixed action set, in enumeration order."""
        wanted = {str(a).strip().lower() for a in suggested if isinstance(a, str)}
        return [a.value for a in AccessAction if a.value in wanted]
