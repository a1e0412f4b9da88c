from flask import Blueprint, current_app, jsonify, request

from services.errors import TranslationError
from services.language_utils import get_all_languages
from services.llm_models.translation_models import TranslationRequest
from services.llm_translation_service import translate_text

bp = Blueprint('translation', __name__, url_prefix='/api')


@bp.errorhandler(TranslationError)
def handle_translation_error(error):
    return jsonify(error.to_dict()), error.status_code


@bp.route('/languages', methods=['GET'])
def get_languages():
    """
    List the registered languages.

    Response:
    {
        "languages": [{"key": "it", "name": "Italian", "code": "it"}, ...]
    }
    """
    return jsonify({'languages': get_all_languages()}), 200


@bp.route('/translate', methods=['POST'])
def translate():
    """
    Translate text and return idioms plus a short contextual description.

    Request body:
    {
        "text": "Ciao mondo",
        "sourceLang": "it",
        "targetLang": "es"
    }

    Response (200):
    {
        "translation": "Hola mundo",
        "idioms": [],
        "description": "Un saludo común."
    }

    Errors:
        400 {"error": "Missing required parameters"}
        500 {"error": "..."} when the LLM is not configured or the call fails
    """
    # Malformed or non-object bodies count as missing parameters
    payload = request.get_json(silent=True)
    translation_request = TranslationRequest.from_payload(payload)

    cfg = current_app.config
    result = translate_text(
        translation_request,
        provider_name=cfg.get('LLM_PROVIDER'),
        model=cfg.get('LLM_MODEL'),
        timeout=cfg.get('LLM_TIMEOUT', 30.0),
        max_retries=cfg.get('LLM_MAX_RETRIES', 0),
        retry_backoff=cfg.get('LLM_RETRY_BACKOFF', 1.0),
        max_idioms=cfg.get('MAX_IDIOMS'),
    )

    return jsonify(result.model_dump()), 200
