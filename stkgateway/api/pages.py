"""
Landing and success pages
"""

import os

from flask import Blueprint, send_from_directory

PAGES_DIR = os.path.join(os.path.dirname(os.path.dirname(__file__)), 'pages')

pages_bp = Blueprint('pages', __name__)


@pages_bp.route('/', methods=['GET'])
def index():
    return send_from_directory(PAGES_DIR, 'index.html')


@pages_bp.route('/<page>.html', methods=['GET'])
def page(page):
    return send_from_directory(PAGES_DIR, f'{page}.html')
