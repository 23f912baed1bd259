"""
ElevenLabs CLI - Account Resources

User, subscription, models, usage, history, workspace and webhooks.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from elevenlabs_cli.resources.base import BaseResource


class UserResource(BaseResource):
    """Current user and subscription."""

    def get(self) -> Dict[str, Any]:
        return self._get("/user")

    def subscription(self) -> Dict[str, Any]:
        return self._get("/user/subscription")


class ModelsResource(BaseResource):
    """Available generation models."""

    def list(self) -> List[Dict[str, Any]]:
        return self._get("/models")


class UsageResource(BaseResource):
    """Character usage statistics."""

    def character_stats(
        self,
        start_unix: int,
        end_unix: int,
        breakdown_type: Optional[str] = None,
        include_workspace_metrics: bool = True,
    ) -> Dict[str, Any]:
        return self._get(
            "/usage/character-stats",
            params={
                "start_unix": start_unix,
                "end_unix": end_unix,
                "breakdown_type": breakdown_type,
                "include_workspace_metrics": include_workspace_metrics,
            },
        )


class HistoryResource(BaseResource):
    """Generation history."""

    def list(self, page_size: int = 10, voice_id: Optional[str] = None) -> Dict[str, Any]:
        return self._get("/history", params={"page_size": page_size, "voice_id": voice_id})

    def get(self, history_item_id: str) -> Dict[str, Any]:
        return self._get(f"/history/{history_item_id}")

    def delete(self, history_item_id: str) -> Dict[str, Any]:
        return self._delete(f"/history/{history_item_id}")

    def audio(self, history_item_id: str) -> bytes:
        return self._get_bytes(f"/history/{history_item_id}/audio")

    def feedback(self, history_item_id: str, thumbs_up: bool, feedback: Optional[str] = None) -> Dict[str, Any]:
        body: Dict[str, Any] = {"thumbs_up": thumbs_up, "feedback": feedback or ""}
        return self._post(f"/history/{history_item_id}/feedback", json=body)


class WorkspaceResource(BaseResource):
    """Workspace members, invites, API keys, secrets and sharing."""

    def info(self) -> Dict[str, Any]:
        return self._get("/workspace")

    def members(self) -> Any:
        return self._get("/workspace/members")

    def remove_member(self, user_id: str) -> Dict[str, Any]:
        return self._delete(f"/workspace/members/{user_id}")

    def invites(self) -> Any:
        return self._get("/workspace/invites")

    def invite(self, email: str, role: str) -> Dict[str, Any]:
        return self._post("/workspace/invites", json={"email": email, "role": role})

    def revoke_invite(self, email: str) -> Dict[str, Any]:
        return self._delete("/workspace/invites", json={"email": email})

    def api_keys(self) -> Any:
        return self._get("/workspace/api-keys")

    def secrets(self) -> Dict[str, Any]:
        return self._get("/convai/secrets")

    def add_secret(self, name: str, value: str, secret_type: str = "new") -> Dict[str, Any]:
        return self._post("/convai/secrets", json={"type": secret_type, "name": name, "value": value})

    def delete_secret(self, secret_id: str) -> Dict[str, Any]:
        return self._delete(f"/convai/secrets/{secret_id}")

    def share(self, resource_type: str, resource_id: str, role: str) -> Dict[str, Any]:
        return self._post(
            f"/workspace/resources/{resource_id}/share",
            json={"resource_type": resource_type, "role": role},
        )

    def unshare(self, resource_type: str, resource_id: str) -> Dict[str, Any]:
        return self._post(
            f"/workspace/resources/{resource_id}/unshare",
            json={"resource_type": resource_type},
        )


class WebhooksResource(BaseResource):
    """Workspace webhooks."""

    def list(self) -> Dict[str, Any]:
        return self._get("/workspace/webhooks")

    def create(self, name: str, url: str, events: Optional[List[str]] = None) -> Dict[str, Any]:
        settings: Dict[str, Any] = {"name": name, "webhook_url": url, "auth_type": "hmac"}
        if events:
            settings["events"] = events
        return self._post("/workspace/webhooks", json={"settings": settings})

    def delete(self, webhook_id: str) -> Dict[str, Any]:
        return self._delete(f"/workspace/webhooks/{webhook_id}")
