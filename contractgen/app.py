import logging
import os
from typing import Any, Dict, Optional

from dotenv import load_dotenv
from flask import Flask, jsonify

from contractgen.artifacts import write_artifacts
from contractgen.completion import generate_code, make_client
from contractgen.deploy import ZERO_ADDRESS, DeployError, run_deployment
from contractgen.fences import strip_markdown_fences
from contractgen.loan import load_loan_record
from contractgen.prompts import build_deploy_prompt, build_preview_prompt

logger = logging.getLogger(__name__)


def create_app(test_config: Optional[Dict[str, Any]] = None) -> Flask:
    app = Flask(__name__)
    app.config["OPENAI_API_KEY"] = os.environ.get("OPENAI_API_KEY")
    app.config["OPENAI_MODEL"] = os.environ.get("OPENAI_MODEL", "gpt-4")
    app.config["OPENAI_TIMEOUT"] = float(os.environ.get("OPENAI_TIMEOUT", "120"))
    app.config["OPENAI_CLIENT"] = None
    app.config["ARTIFACT_ROOT"] = os.environ.get("ARTIFACT_ROOT", os.getcwd())
    app.config["TRUFFLE_BIN"] = os.environ.get("TRUFFLE_BIN", "truffle")
    app.config["DEPLOY_NETWORK"] = os.environ.get("DEPLOY_NETWORK", "development")
    app.config["DEPLOY_TIMEOUT"] = float(os.environ.get("DEPLOY_TIMEOUT", "600"))
    app.config["DEPLOY_CONTRACT_NAME"] = os.environ.get("DEPLOY_CONTRACT_NAME", "CustomMortgageLoan")
    app.config["LOAN_DATA_PATH"] = os.environ.get("LOAN_DATA_PATH")
    if test_config:
        app.config.update(test_config)
    if app.config.get("LOAN_RECORD") is None:
        app.config["LOAN_RECORD"] = load_loan_record(app.config["LOAN_DATA_PATH"])

    def get_client():
        client = app.config["OPENAI_CLIENT"]
        if client is None:
            client = make_client(app.config["OPENAI_API_KEY"], app.config["OPENAI_TIMEOUT"])
            app.config["OPENAI_CLIENT"] = client
        return client

    def json_error(message, status):
        return jsonify({"error": message}), status

    @app.get("/test")
    def test():
        return jsonify({"message": "Server is running!"})

    @app.get("/generate-prompt")
    def generate_prompt():
        loan = app.config["LOAN_RECORD"]
        prompt = build_preview_prompt(loan)
        try:
            raw = generate_code(get_client(), prompt, app.config["OPENAI_MODEL"])
        except Exception as e:
            logger.exception("Error in generate-prompt route")
            return json_error(str(e), 500)
        return jsonify({"prompt": prompt, "generatedCode": strip_markdown_fences(raw)})

    @app.post("/auto-deploy")
    def auto_deploy():
        loan = app.config["LOAN_RECORD"]
        base = app.config["DEPLOY_CONTRACT_NAME"]
        try:
            prompt = build_deploy_prompt(loan, base)
            raw = generate_code(get_client(), prompt, app.config["OPENAI_MODEL"], temperature=0)
            artifact = write_artifacts(strip_markdown_fences(raw), base, app.config["ARTIFACT_ROOT"])
            result = run_deployment(
                app.config["ARTIFACT_ROOT"],
                truffle=app.config["TRUFFLE_BIN"],
                network=app.config["DEPLOY_NETWORK"],
                timeout=app.config["DEPLOY_TIMEOUT"],
            )
        except DeployError:
            return json_error("Failed to compile or deploy contract", 500)
        except Exception as e:
            logger.exception("Error in auto-deploy route")
            return json_error(str(e), 500)

        if not result.confirmed:
            resp = jsonify({
                "contractAddress": ZERO_ADDRESS,
                "info": "Contract deployed but no address found in logs.",
            })
            resp.headers["X-Deployment-Status"] = "unconfirmed"
            return resp, 200
        logger.info("Deployed %s at %s", artifact.name, result.contract_address)
        resp = jsonify({"contractAddress": result.contract_address})
        resp.headers["X-Deployment-Status"] = "confirmed"
        return resp, 200

    return app


def main():
    load_dotenv()
    logging.basicConfig(
        level=os.environ.get("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app = create_app()
    port = int(os.environ.get("PORT", "4000"))
    logger.info("Listening on port %s", port)
    app.run(host=os.environ.get("HOST", "127.0.0.1"), port=port, debug=False)
