"""Generate loan smart contracts with an LLM and deploy them through Truffle."""

from contractgen.app import create_app

__all__ = ["create_app"]
