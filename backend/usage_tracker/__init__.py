"""XMPPVOX usage tracker — installation and session tracking API."""
