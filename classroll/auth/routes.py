"""Routes for the auth blueprint."""

from firebase_admin import auth, firestore
from flask import current_app, jsonify, request, session

from classroll.core.constants import USERS_COLLECTION
from classroll.extensions import csrf

from . import bp
from .decorators import current_auth, role_required


@bp.route("/session_login", methods=["POST"])
@csrf.exempt
def session_login():
    """
    Called by the client after a successful Firebase sign-in.
    It receives the ID token, verifies it, and creates a server-side session.
    """
    id_token = (request.get_json(silent=True) or {}).get("idToken")
    if not id_token:
        return jsonify({"status": "error", "message": "Missing idToken."}), 400
    try:
        decoded_token = auth.verify_id_token(id_token)
        uid = decoded_token["uid"]
        db = firestore.client()
        user_doc = db.collection(USERS_COLLECTION).document(uid).get()
    except Exception as e:
        current_app.logger.error(f"Error during session login: {e}")
        return (
            jsonify({"status": "error", "message": "Invalid token or server error."}),
            401,
        )

    if not user_doc.exists:
        return (
            jsonify({"status": "error", "message": "User not found in Firestore."}),
            404,
        )
    session["user_id"] = uid
    current_app.logger.info(f"User {uid} signed in.")
    return jsonify({"status": "success", "role": (user_doc.to_dict() or {}).get("role")})


@bp.route("/logout", methods=["POST"])
def logout():
    """Clear the server-side session. Firebase sign-out happens on the client."""
    session.clear()
    return jsonify({"status": "success"})


@bp.route("/me", methods=["GET"])
@role_required()
def me():
    """Return the signed-in user's role."""
    auth_context = current_auth()
    return jsonify(
        {"uid": auth_context.uid, "email": auth_context.email, "role": auth_context.role}
    )
