from flask import Blueprint, current_app, jsonify

main = Blueprint('main', __name__)


@main.route('/')
def index():
    router = current_app.extensions['showgame']
    return jsonify({
        'message': 'Welcome to the Show game server!',
        'active_rooms': len(router.registry),
    })


@main.route('/health')
def health():
    return 'OK', 200


@main.route('/keep-alive')
def keep_alive():
    return 'OK', 200
