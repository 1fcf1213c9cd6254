import subprocess
from types import SimpleNamespace

import pytest

from contractgen import create_app
from contractgen.loan import DEFAULT_LOAN

FENCED_CONTRACT = "```solidity\npragma solidity ^0.8.0;\ncontract CustomMortgageLoan {}\n```"


class FakeCompletions:
    """Stands in for ``client.chat.completions`` of the openai SDK."""

    def __init__(self, content=FENCED_CONTRACT):
        self.content = content
        self.error = None
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        message = SimpleNamespace(role="assistant", content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(index=0, message=message)])


class FakeToolchain:
    """Replaces subprocess.run for truffle invocations."""

    def __init__(self):
        self.calls = []
        self.stdout = {"compile": "Compiling your contracts...\n", "migrate": ""}
        self.fail_on = None
        self.exc = None

    def __call__(self, cmd, **kwargs):
        self.calls.append((cmd, kwargs))
        if self.exc is not None:
            raise self.exc
        step = cmd[1]
        if step == self.fail_on:
            raise subprocess.CalledProcessError(1, cmd, output=self.stdout.get(step, ""), stderr="Error: boom")
        return subprocess.CompletedProcess(cmd, 0, stdout=self.stdout.get(step, ""), stderr="")


@pytest.fixture()
def llm():
    return SimpleNamespace(chat=SimpleNamespace(completions=FakeCompletions()))


@pytest.fixture()
def toolchain(monkeypatch):
    fake = FakeToolchain()
    monkeypatch.setattr("contractgen.deploy.subprocess.run", fake)
    return fake


@pytest.fixture()
def app(tmp_path, llm):
    app = create_app({
        "TESTING": True,
        "ARTIFACT_ROOT": str(tmp_path),
        "OPENAI_CLIENT": llm,
        "LOAN_RECORD": DEFAULT_LOAN,
        "DEPLOY_TIMEOUT": 5.0,
    })
    return app


@pytest.fixture()
def client(app):
    with app.test_client() as c:
        yield c
