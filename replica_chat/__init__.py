"""
Streamlit chat client for hosted Sensay replicas.

Modules:
- manager: ChatSessionManager owning credential, transcript and exchange state
- provisioner: SessionProvisioner resolving the demo user + replica once per key
- client: SensayClient, a thin requests wrapper around the REST API
- errors: exception types + display-message extraction chain
- states: ChatMessage/Role/Session/ExchangeState
- config: env/.env settings
"""
