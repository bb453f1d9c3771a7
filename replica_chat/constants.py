from __future__ import annotations

SAMPLE_USER_ID = "sample-user"
SAMPLE_USER_NAME = "Sample User"
SAMPLE_REPLICA_SLUG = "sample-replica"
API_VERSION = "2025-03-25"

COMPLETION_SOURCE = "web"

SAMPLE_REPLICA = {
    "name": "Sample Replica",
    "shortDescription": "A sample replica for demonstration",
    "greeting": "Hello, I'm the sample replica. How can I help you today?",
    "slug": SAMPLE_REPLICA_SLUG,
    "ownerID": SAMPLE_USER_ID,
    "llm": {
        "model": "claude-3-7-sonnet-latest",
        "memoryMode": "prompt-caching",
        "systemMessage": "You are a helpful AI assistant that provides clear and concise responses.",
    },
}


def sample_user_email(user_id: str = SAMPLE_USER_ID) -> str:
    return f"{user_id}@example.com"
