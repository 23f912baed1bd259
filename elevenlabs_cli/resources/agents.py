"""
ElevenLabs CLI - Agents Platform Resources

Conversational AI agents and everything hanging off them: conversations,
knowledge base documents, RAG indexes, tools, phone numbers and batch calls.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional, Union

from elevenlabs_cli.resources.base import BaseResource, file_part


class AgentsResource(BaseResource):
    """Agents API resource."""

    def list(self, page_size: Optional[int] = None, search: Optional[str] = None) -> Dict[str, Any]:
        return self._get("/convai/agents", params={"page_size": page_size, "search": search})

    def summaries(self, page_size: Optional[int] = None) -> Dict[str, Any]:
        return self._get("/convai/agents/summaries", params={"page_size": page_size})

    def get(self, agent_id: str) -> Dict[str, Any]:
        return self._get(f"/convai/agents/{agent_id}")

    def create(self, **data: Any) -> Dict[str, Any]:
        return self._post("/convai/agents/create", json=data)

    def update(self, agent_id: str, **data: Any) -> Dict[str, Any]:
        return self._patch(f"/convai/agents/{agent_id}", json=data)

    def delete(self, agent_id: str) -> Dict[str, Any]:
        return self._delete(f"/convai/agents/{agent_id}")

    def link(self, agent_id: str) -> Dict[str, Any]:
        return self._get(f"/convai/agents/{agent_id}/link")

    def duplicate(self, agent_id: str, name: Optional[str] = None) -> Dict[str, Any]:
        return self._post(f"/convai/agents/{agent_id}/duplicate", json=self._compact(name=name))

    def branches(self, agent_id: str) -> Dict[str, Any]:
        return self._get(f"/convai/agents/{agent_id}/branches")

    def rename_branch(self, agent_id: str, branch_id: str, name: str) -> Dict[str, Any]:
        return self._patch(f"/convai/agents/{agent_id}/branches/{branch_id}", json={"name": name})

    def simulate(self, agent_id: str, message: str, max_turns: int = 5) -> Dict[str, Any]:
        body = {
            "simulation_specification": {
                "simulated_user_config": {
                    "first_message": message,
                },
            },
            "new_turns_limit": max_turns,
        }
        return self._post(f"/convai/agents/{agent_id}/simulate-conversation", json=body)

    def update_turn(
        self,
        agent_id: str,
        spelling_patience: Optional[str] = None,
        silence_threshold_ms: Optional[int] = None,
    ) -> Dict[str, Any]:
        turn = self._compact(spelling_patience=spelling_patience, silence_threshold_ms=silence_threshold_ms)
        return self.update(agent_id, conversation_config={"turn": turn})

    def whatsapp_accounts(self) -> Dict[str, Any]:
        return self._get("/convai/whatsapp-accounts")

    def widget(self, agent_id: str) -> Dict[str, Any]:
        return self._get(f"/convai/agents/{agent_id}/widget")

    def upload_avatar(self, agent_id: str, path: Union[str, Path]) -> Dict[str, Any]:
        return self._post(
            f"/convai/agents/{agent_id}/avatar",
            form={},
            files={"avatar_file": file_part(path)},
        )


class BatchCallsResource(BaseResource):
    """Batch calling jobs."""

    def list(self, limit: Optional[int] = None) -> Dict[str, Any]:
        return self._get("/convai/batch-calling/workspace", params={"limit": limit})

    def get(self, batch_id: str) -> Dict[str, Any]:
        return self._get(f"/convai/batch-calling/{batch_id}")

    def delete(self, batch_id: str) -> Dict[str, Any]:
        return self._delete(f"/convai/batch-calling/{batch_id}")


class ConversationsResource(BaseResource):
    """Agent conversations."""

    def list(
        self,
        agent_id: Optional[str] = None,
        page_size: Optional[int] = None,
        branch_id: Optional[str] = None,
    ) -> Dict[str, Any]:
        return self._get(
            "/convai/conversations",
            params={"agent_id": agent_id, "page_size": page_size, "branch_id": branch_id},
        )

    def get(self, conversation_id: str) -> Dict[str, Any]:
        return self._get(f"/convai/conversations/{conversation_id}")

    def delete(self, conversation_id: str) -> Dict[str, Any]:
        return self._delete(f"/convai/conversations/{conversation_id}")

    def audio(self, conversation_id: str) -> bytes:
        return self._get_bytes(f"/convai/conversations/{conversation_id}/audio")

    def feedback(self, conversation_id: str, positive: bool) -> Dict[str, Any]:
        return self._post(
            f"/convai/conversations/{conversation_id}/feedback",
            json={"feedback": "like" if positive else "dislike"},
        )

    def signed_url(self, agent_id: str, branch_id: Optional[str] = None) -> Dict[str, Any]:
        return self._get(
            "/convai/conversation/get-signed-url",
            params={"agent_id": agent_id, "branch_id": branch_id},
        )

    def token(self, agent_id: str, branch_id: Optional[str] = None) -> Dict[str, Any]:
        return self._get(
            "/convai/conversation/token",
            params={"agent_id": agent_id, "branch_id": branch_id},
        )

    def outbound_call(
        self,
        agent_id: str,
        agent_phone_number_id: str,
        to_number: str,
        first_message: Optional[str] = None,
    ) -> Dict[str, Any]:
        body: Dict[str, Any] = {
            "agent_id": agent_id,
            "agent_phone_number_id": agent_phone_number_id,
            "to_number": to_number,
        }
        if first_message:
            body["conversation_initiation_client_data"] = {
                "conversation_config_override": {"agent": {"first_message": first_message}},
            }
        return self._post("/convai/twilio/outbound-call", json=body)


class KnowledgeBaseResource(BaseResource):
    """Knowledge base documents."""

    def list(self, page_size: Optional[int] = None, cursor: Optional[str] = None) -> Dict[str, Any]:
        return self._get("/convai/knowledge-base", params={"page_size": page_size, "cursor": cursor})

    def add_from_url(self, url: str, name: Optional[str] = None) -> Dict[str, Any]:
        return self._post("/convai/knowledge-base/url", json=self._compact(url=url, name=name))

    def add_from_text(self, text: str, name: Optional[str] = None) -> Dict[str, Any]:
        return self._post("/convai/knowledge-base/text", json=self._compact(text=text, name=name))

    def add_from_file(self, path: Union[str, Path], name: Optional[str] = None) -> Dict[str, Any]:
        return self._post(
            "/convai/knowledge-base/file",
            form=self._compact(name=name),
            files={"file": file_part(path)},
        )

    def get(self, document_id: str) -> Dict[str, Any]:
        return self._get(f"/convai/knowledge-base/{document_id}")

    def delete(self, document_id: str) -> Dict[str, Any]:
        return self._delete(f"/convai/knowledge-base/{document_id}")


class RagResource(BaseResource):
    """RAG indexes over knowledge base documents."""

    def create(self, document_id: str, model: str) -> Dict[str, Any]:
        return self._post(f"/convai/knowledge-base/{document_id}/rag-index", json={"model": model})

    def status(self, document_id: str, rag_index_id: str) -> Dict[str, Any]:
        return self._get(f"/convai/knowledge-base/{document_id}/rag-index/{rag_index_id}")

    def delete(self, document_id: str, rag_index_id: str) -> Dict[str, Any]:
        return self._delete(f"/convai/knowledge-base/{document_id}/rag-index/{rag_index_id}")

    def rebuild(self, document_id: str) -> Dict[str, Any]:
        return self._post(f"/convai/knowledge-base/{document_id}/rebuild-index")

    def index_status(self, document_id: str) -> Dict[str, Any]:
        return self._get(f"/convai/knowledge-base/{document_id}/rag-index")


class ToolsResource(BaseResource):
    """Agent tools (webhook/client tool definitions)."""

    def list(self, search: Optional[str] = None, page_size: Optional[int] = None) -> Dict[str, Any]:
        return self._get("/convai/tools", params={"search": search, "page_size": page_size})

    def get(self, tool_id: str) -> Dict[str, Any]:
        return self._get(f"/convai/tools/{tool_id}")

    def create(self, tool_config: Dict[str, Any]) -> Dict[str, Any]:
        return self._post("/convai/tools", json={"tool_config": tool_config})

    def update(self, tool_id: str, tool_config: Dict[str, Any]) -> Dict[str, Any]:
        return self._patch(f"/convai/tools/{tool_id}", json={"tool_config": tool_config})

    def delete(self, tool_id: str) -> Dict[str, Any]:
        return self._delete(f"/convai/tools/{tool_id}")


class PhoneNumbersResource(BaseResource):
    """Phone numbers API resource."""

    def list(self, agent_id: Optional[str] = None) -> Any:
        return self._get("/convai/phone-numbers", params={"agent_id": agent_id})

    def get(self, phone_number_id: str) -> Dict[str, Any]:
        return self._get(f"/convai/phone-numbers/{phone_number_id}")

    def create(self, **data: Any) -> Dict[str, Any]:
        return self._post("/convai/phone-numbers", json=data)

    def update(self, phone_number_id: str, **data: Any) -> Dict[str, Any]:
        return self._patch(f"/convai/phone-numbers/{phone_number_id}", json=data)

    def delete(self, phone_number_id: str) -> Dict[str, Any]:
        return self._delete(f"/convai/phone-numbers/{phone_number_id}")

    def test_call(self, phone_number_id: str, agent_id: Optional[str] = None) -> Dict[str, Any]:
        return self._post(
            f"/convai/phone-numbers/{phone_number_id}/test-call",
            json=self._compact(agent_id=agent_id),
        )
