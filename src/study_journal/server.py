"""Flask app exposing the chat-completion proxy."""
import logging
from numbers import Number

from flask import Flask, jsonify, request
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

from study_journal.config import Settings, configure_logging, load_settings
from study_journal.errors import (
    ChatTimeoutError, ConfigurationError, TransportError, UpstreamError, ValidationError,
)
from study_journal.gateway import ChatGateway
from study_journal.prompts import build_prompt
from study_journal.sanitize import sanitize

logger = logging.getLogger(__name__)

ROLES = {"system", "user", "assistant"}
NOTE_FIELDS = ("notes", "text", "noteContent")


def _validate_messages(messages) -> list[dict]:
    if not isinstance(messages, list) or not messages:
        raise ValidationError("'messages' must be a non-empty list.")
    cleaned = []
    for i, message in enumerate(messages):
        if not isinstance(message, dict):
            raise ValidationError(f"messages[{i}] must be an object.")
        if message.get("role") not in ROLES:
            raise ValidationError(f"messages[{i}].role must be one of: system, user, assistant.")
        if not isinstance(message.get("content"), str):
            raise ValidationError(f"messages[{i}].content must be a string.")
        cleaned.append({"role": message["role"], "content": message["content"]})
    return cleaned


def build_payload(body) -> dict:
    """Turn a request body into an upstream chat-completion payload.

    Accepts the ``messages`` form, or the simplified ``mode`` form which is
    expanded into messages with the prompt builder.
    """
    if not isinstance(body, dict):
        raise ValidationError("Request body must be a JSON object.")
    if "messages" in body:
        payload = {"messages": _validate_messages(body["messages"])}
    elif "mode" in body:
        note = next((body[f] for f in NOTE_FIELDS if body.get(f)), None)
        prompt = build_prompt(
            body["mode"], source_text=note, topic=body.get("topic"),
            question_count=body.get("numQuestions"),
        )
        payload = {"messages": prompt.to_messages()}
    else:
        raise ValidationError("Request body needs 'messages' or 'mode'.")

    model = body.get("model")
    if model is not None:
        if not isinstance(model, str) or not model.strip():
            raise ValidationError("'model' must be a non-empty string.")
        payload["model"] = model.strip()
    temperature = body.get("temperature")
    if temperature is not None:
        if isinstance(temperature, bool) or not isinstance(temperature, Number) or not 0 <= temperature <= 2:
            raise ValidationError("'temperature' must be a number between 0 and 2.")
        payload["temperature"] = temperature
    return payload


def create_app(settings: Settings | None = None, gateway: ChatGateway | None = None) -> Flask:
    settings = settings or load_settings()
    gateway = gateway or ChatGateway.from_settings(settings)
    if not gateway.configured:
        logger.warning("OPENAI_API_KEY is not set. Requests to /api/chat will fail.")

    app = Flask(__name__)
    CORS(app, origins=list(settings.cors_origins))

    @app.route("/api/health")
    def health():
        return jsonify({"ok": True})

    @app.route("/api/chat", methods=["POST"])
    def chat():
        try:
            payload = build_payload(request.get_json(silent=True))
            data = gateway.forward(payload)
        except ValidationError as e:
            return jsonify({"error": e.message}), 400
        except ConfigurationError as e:
            logger.error("%s", e.message)
            return jsonify({"error": "Server configuration error."}), 500
        except UpstreamError as e:
            return jsonify({"error": e.message, "details": e.body}), e.status_code
        except (ChatTimeoutError, TransportError) as e:
            return jsonify({"error": "Server error contacting AI service.", "details": e.message}), 500

        try:
            message = data["choices"][0]["message"]
        except (KeyError, IndexError, TypeError):
            message = None
        if isinstance(message, dict) and isinstance(message.get("content"), str):
            message["content"] = sanitize(message["content"])
        return jsonify(data)

    @app.errorhandler(405)
    def method_not_allowed(e):
        return jsonify({"error": "Method not allowed"}), 405

    @app.errorhandler(Exception)
    def unexpected_error(e):
        if isinstance(e, HTTPException):
            return jsonify({"error": e.description}), e.code
        logger.exception("Unexpected error handling %s", request.path)
        return jsonify({"error": "Unexpected server error."}), 500

    return app


def run_server(settings: Settings | None = None) -> None:
    settings = settings or load_settings()
    app = create_app(settings)
    app.run(host="127.0.0.1", port=settings.port)


def main():
    settings = load_settings()
    configure_logging(settings.log_level)
    run_server(settings)


if __name__ == "__main__":
    main()
