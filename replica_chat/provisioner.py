from __future__ import annotations

import copy
from typing import Callable, Mapping, Optional

import requests
from loguru import logger

from .client import SensayClient
from .constants import SAMPLE_REPLICA, SAMPLE_REPLICA_SLUG, SAMPLE_USER_NAME, sample_user_email
from .errors import ApiError, ReplicaChatError, SessionInitError
from .states import Session


ClientFactory = Callable[..., SensayClient]


class SessionProvisioner:
    """Resolve the demo replica for a credential, provisioning it on first use.

    The resolved uuid is cached on `session` together with the credential it
    was resolved with; a later call with the same credential makes no
    network calls, a different credential provisions again.
    """

    def __init__(self, session: Optional[Session] = None, client_factory: ClientFactory = SensayClient) -> None:
        self.session = session or Session()
        self.client_factory = client_factory

    def reset(self) -> None:
        if self.session.resolved:
            logger.info("session_reset | cached replica dropped")
        self.session.reset()

    def resolve(self, credential: str) -> str:
        if self.session.matches(credential):
            return self.session.replica_uuid

        user_id = self.session.user_id
        logger.info(f"session_init:start | user={user_id} slug={SAMPLE_REPLICA_SLUG}")
        try:
            self._ensure_user(self.client_factory(credential), user_id)
            uuid = self._ensure_replica(self.client_factory(credential, user_id), user_id)
        except (ReplicaChatError, requests.RequestException) as e:
            logger.error(f"session_init:failed | user={user_id} | {type(e).__name__}: {e} | detail={getattr(e, 'data', None)!r}")
            raise SessionInitError() from e

        self.session.replica_uuid = uuid
        self.session.credential = credential
        logger.info(f"session_init:done | replica={uuid}")
        return uuid

    def _ensure_user(self, org_client: SensayClient, user_id: str) -> None:
        # Only a 404 means "absent"; anything else aborts provisioning.
        try:
            org_client.get_user(user_id)
            logger.info(f"session_init:user_exists | user={user_id}")
            return
        except ApiError as e:
            if not e.is_not_found:
                raise
        logger.info(f"session_init:user_missing | user={user_id} | creating")
        org_client.create_user(user_id, sample_user_email(user_id), SAMPLE_USER_NAME)
        logger.info(f"session_init:user_created | user={user_id}")

    def _ensure_replica(self, user_client: SensayClient, user_id: str) -> str:
        for replica in user_client.list_replicas():
            if not isinstance(replica, Mapping):
                continue
            if replica.get("slug") == SAMPLE_REPLICA_SLUG and replica.get("uuid"):
                logger.info(f"session_init:replica_exists | slug={SAMPLE_REPLICA_SLUG}")
                return replica["uuid"]

        payload = copy.deepcopy(SAMPLE_REPLICA)
        payload["ownerID"] = user_id
        created = user_client.create_replica(payload)
        uuid = created.get("uuid") if isinstance(created, Mapping) else None
        if not uuid:
            raise ReplicaChatError(f"replica create response has no uuid: {created!r}"[:300])
        logger.info(f"session_init:replica_created | slug={SAMPLE_REPLICA_SLUG} replica={uuid}")
        return uuid
