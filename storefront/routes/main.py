from flask import Blueprint, current_app, jsonify, request, session
from storefront.models import Product, Testimonial
from storefront.services.catalog import filter_products, category_names

bp = Blueprint('main', __name__)

@bp.route('/')
def index():
    current_app.logger.info('Home page accessed', extra={
        'event_type': 'page_view',
        'page': 'home'
    })

    products = Product.query.all()
    shown = filter_products(
        products,
        category=request.args.get('category', 'all'),
        search=request.args.get('search', ''),
        sort_order=request.args.get('sort', 'asc'),
    )[:current_app.config['HOME_PRODUCT_LIMIT']]

    current_app.logger.info(f'Displaying {len(shown)} products on home page', extra={
        'event_type': 'data_loaded',
        'product_count': len(shown)
    })

    return jsonify({
        'products': [p.to_dict() for p in shown],
        'categories': category_names(products),
        'testimonials': [t.to_dict() for t in Testimonial.query.all()],
        'dark_mode': session.get('dark_mode', False),
    })

@bp.route('/health')
def health():
    current_app.logger.debug('Health check endpoint called')
    return {'status': 'healthy'}, 200

@bp.route('/theme/toggle', methods=['POST'])
def toggle_theme():
    session['dark_mode'] = not session.get('dark_mode', False)
    return jsonify({'dark_mode': session['dark_mode']})
