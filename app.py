import logging
import os
import threading
from datetime import date
from functools import wraps

import click
from flask import Blueprint, Flask, current_app, jsonify, request, send_from_directory
from flask.cli import with_appcontext
from flask_migrate import Migrate
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError

from config import get_config
from models import db
from schemas import (
    RecipeCreate, RecipeUpdate, RecipeOut,
    SettingsSchema,
    WeekPlanCreate, WeekPlanOut, MealOut, RandomFillRequest,
    TagCreate, TagOut, UnitCreate, UnitOut, IngredientUsage,
    parse_date,
)
from services import (
    ServiceError, ValidationFailure, StoreFailure,
    RecipeService, CatalogService, SettingsService, WeekPlanService,
    build_shopping_list,
    NotificationScheduler, watch_settings,
    SupabaseClient,
)
from utils import save_recipe_image, recipe_image_name, ImageValidationError

logger = logging.getLogger(__name__)

migrate = Migrate()
api = Blueprint('api', __name__, url_prefix='/api')


def store_errors(message):
    """
    Turn database and hosted-backend failures of a view into a 500 with a
    fixed message. The session is rolled back and the cause is only logged.
    """
    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            try:
                return view(*args, **kwargs)
            except (SQLAlchemyError, StoreFailure):
                db.session.rollback()
                logger.exception(message)
                return jsonify(error=message), 500
        return wrapper
    return decorator


def parse_body(schema):
    """Validate the JSON body against a pydantic schema."""
    payload = request.get_json(silent=True)
    if payload is None:
        raise ValidationFailure('Request body must be JSON')
    return schema.model_validate(payload)


def parse_date_arg(name):
    value = request.args.get(name, '').strip()
    if not value:
        raise ValidationFailure(f'{name} is required')
    try:
        return parse_date(value)
    except ValueError:
        raise ValidationFailure(f'{name} must be a date (YYYY-MM-DD)')


def _remove_upload(recipe_id):
    """Delete the photo uploaded for a recipe, if there is one."""
    path = os.path.join(current_app.config['UPLOAD_FOLDER'], recipe_image_name(recipe_id))
    try:
        if os.path.exists(path):
            os.remove(path)
    except OSError:
        logger.warning("Could not remove image %s", path)


# ============================================
# ROUTES - RECIPES
# ============================================

@api.route('/recipes', methods=['GET'])
@store_errors('Failed to fetch recipes')
def recipes_list():
    service = RecipeService(db.session)
    search = request.args.get('search', '').strip()
    tags = [t for t in request.args.get('tags', '').split(',') if t.strip()]
    if search or tags:
        recipes = service.search(search, tags)
    else:
        recipes = service.list_recipes()
    return jsonify([RecipeOut.from_model(recipe).to_json() for recipe in recipes])


@api.route('/recipes/<recipe_id>', methods=['GET'])
@store_errors('Failed to fetch recipe')
def recipe_view(recipe_id):
    recipe = RecipeService(db.session).get(recipe_id)
    return jsonify(RecipeOut.from_model(recipe).to_json())


@api.route('/recipes', methods=['POST'])
@store_errors('Failed to create recipe')
def recipe_add():
    data = parse_body(RecipeCreate)
    recipe = RecipeService(db.session).create(data)
    return jsonify(RecipeOut.from_model(recipe).to_json()), 201


@api.route('/recipes/<recipe_id>', methods=['PUT'])
@store_errors('Failed to update recipe')
def recipe_edit(recipe_id):
    data = parse_body(RecipeUpdate)
    recipe = RecipeService(db.session).update(recipe_id, data)
    return jsonify(RecipeOut.from_model(recipe).to_json())


@api.route('/recipes/<recipe_id>', methods=['DELETE'])
@store_errors('Failed to delete recipe')
def recipe_delete(recipe_id):
    RecipeService(db.session).delete(recipe_id)
    _remove_upload(recipe_id)
    return '', 204


@api.route('/recipes/<recipe_id>/image', methods=['POST'])
@store_errors('Failed to upload image')
def recipe_upload_image(recipe_id):
    service = RecipeService(db.session)
    service.get(recipe_id)

    try:
        filename = save_recipe_image(
            request.files.get('image'), current_app.config['UPLOAD_FOLDER'], recipe_id
        )
    except ImageValidationError as e:
        raise ValidationFailure(f'Invalid image: {e}')

    service.set_image(recipe_id, filename)
    return jsonify(RecipeOut.from_model(service.get(recipe_id)).to_json())


# ============================================
# ROUTES - TAGS, UNITS, INGREDIENTS
# ============================================

@api.route('/tags', methods=['GET'])
@store_errors('Failed to fetch tags')
def tags_list():
    rows = CatalogService(db.session).list_tags()
    return jsonify([
        TagOut(id=tag.id, name=tag.name, color=tag.color, recipe_count=count).to_json()
        for tag, count in rows
    ])


@api.route('/tags', methods=['POST'])
@store_errors('Failed to create tag')
def tag_add():
    data = parse_body(TagCreate)
    tag = CatalogService(db.session).create_tag(data.name, data.color)
    return jsonify(TagOut(id=tag.id, name=tag.name, color=tag.color).to_json()), 201


@api.route('/tags/<int:tag_id>', methods=['DELETE'])
@store_errors('Failed to delete tag')
def tag_delete(tag_id):
    CatalogService(db.session).delete_tag(tag_id)
    return '', 204


@api.route('/units', methods=['GET'])
@store_errors('Failed to fetch units')
def units_list():
    units = CatalogService(db.session).list_units()
    return jsonify([UnitOut(id=unit.id, name=unit.name).to_json() for unit in units])


@api.route('/units', methods=['POST'])
@store_errors('Failed to create unit')
def unit_add():
    data = parse_body(UnitCreate)
    unit = CatalogService(db.session).create_unit(data.name)
    return jsonify(UnitOut(id=unit.id, name=unit.name).to_json()), 201


@api.route('/units/<int:unit_id>', methods=['DELETE'])
@store_errors('Failed to delete unit')
def unit_delete(unit_id):
    CatalogService(db.session).delete_unit(unit_id)
    return '', 204


@api.route('/ingredients', methods=['GET'])
@store_errors('Failed to fetch ingredients')
def ingredients_list():
    overview = CatalogService(db.session).ingredient_overview()
    return jsonify([IngredientUsage(**entry).to_json() for entry in overview])


# ============================================
# ROUTES - SETTINGS
# ============================================

@api.route('/settings', methods=['GET'])
@store_errors('Failed to fetch settings')
def settings_view():
    return jsonify(SettingsService(db.session).get().to_json())


@api.route('/settings', methods=['PUT'])
@store_errors('Failed to update settings')
def settings_update():
    data = parse_body(SettingsSchema)
    return jsonify(SettingsService(db.session).set(data).to_json())


# ============================================
# ROUTES - WEEK PLAN
# ============================================

@api.route('/weekplan/current', methods=['GET'])
@store_errors('Failed to fetch week plan')
def week_plan_current():
    plan = WeekPlanService(db.session).get_current()
    return jsonify(WeekPlanOut.from_model(plan).to_json() if plan else None)


@api.route('/weekplan', methods=['GET'])
@store_errors('Failed to fetch week plan')
def week_plan_for_week():
    week_start = parse_date_arg('weekStart')
    plan = WeekPlanService(db.session).get_for_week(week_start)
    return jsonify(WeekPlanOut.from_model(plan).to_json() if plan else None)


@api.route('/weekplan/today', methods=['GET'])
@store_errors('Failed to fetch today\'s meal')
def week_plan_today():
    meal = WeekPlanService(db.session).get_meal_for_date(date.today())
    return jsonify(MealOut.from_model(meal).to_json() if meal else None)


@api.route('/weekplan', methods=['POST'])
@store_errors('Failed to create week plan')
def week_plan_save():
    data = parse_body(WeekPlanCreate)
    plan = WeekPlanService(db.session).save(data)
    return jsonify(WeekPlanOut.from_model(plan).to_json()), 201


@api.route('/weekplan/random-fill', methods=['POST'])
@store_errors('Failed to fill week plan')
def week_plan_random_fill():
    data = parse_body(RandomFillRequest)
    filled = WeekPlanService(db.session).random_fill_week(data.week_start, data.assignments)
    return jsonify(assignments={
        day.isoformat(): RecipeOut.from_model(recipe).to_json()
        for day, recipe in sorted(filled.items())
    })


# ============================================
# ROUTES - SHOPPING LIST
# ============================================

@api.route('/shopping-list', methods=['GET'])
@store_errors('Failed to build shopping list')
def shopping_list():
    plan = WeekPlanService(db.session).get_current()
    week_plan = WeekPlanOut.from_model(plan) if plan else None
    items = build_shopping_list(week_plan)
    return jsonify(
        weekPlanId=week_plan.id if week_plan else None,
        items=[item.to_json() for item in items],
    )


# ============================================
# ERROR HANDLERS
# ============================================

def handle_service_error(error):
    body = {'error': error.message}
    if error.details:
        body['details'] = error.details
    return jsonify(body), error.status_code


def handle_validation_error(error):
    details = error.errors(include_url=False, include_context=False, include_input=False)
    return jsonify(error='Invalid request body', details=details), 400


# ============================================
# CLI COMMANDS
# ============================================

def init_db(app):
    """Create all tables and seed the unit registry."""
    with app.app_context():
        db.create_all()
        added = CatalogService(db.session).ensure_default_units()
        logger.info("Database initialized (%d units added)", added)


@click.command('init-db')
@with_appcontext
def init_db_command():
    """Create tables and seed default units."""
    init_db(current_app._get_current_object())
    click.echo('Database initialized.')


def _notification_sources(app):
    """(fetch_settings, meal_lookup) backed by the hosted backend or the local store."""
    if app.config['SUPABASE_URL']:
        client = SupabaseClient(app.config['SUPABASE_URL'], app.config['SUPABASE_ANON_KEY'])

        def meal_lookup(day):
            meal = client.fetch_meal_for_date(day)
            return meal.recipe.name if meal else None

        return client.fetch_settings, meal_lookup

    def fetch_settings():
        with app.app_context():
            return SettingsService(db.session).get()

    def meal_lookup(day):
        with app.app_context():
            meal = WeekPlanService(db.session).get_meal_for_date(day)
            return meal.recipe.name if meal else None

    return fetch_settings, meal_lookup


@click.command('notify')
@with_appcontext
def notify_command():
    """Run the reminder scheduler in the foreground."""
    app = current_app._get_current_object()
    fetch_settings, meal_lookup = _notification_sources(app)
    scheduler = NotificationScheduler(meal_lookup=meal_lookup)
    stop = threading.Event()
    click.echo('Watching notification settings (Ctrl+C to stop)')
    try:
        watch_settings(fetch_settings, scheduler, app.config['NOTIFY_POLL_SECONDS'], stop)
    except KeyboardInterrupt:
        stop.set()


# ============================================
# APPLICATION FACTORY
# ============================================

def create_app(config_name=None, overrides=None):
    app = Flask(__name__)
    app.config.from_object(get_config(config_name))
    if overrides:
        app.config.update(overrides)

    logging.basicConfig(
        level=app.config['LOG_LEVEL'],
        format='%(asctime)s %(levelname)s [%(name)s] %(message)s',
    )

    app.json.sort_keys = False

    db.init_app(app)
    migrate.init_app(app, db)

    app.register_blueprint(api)
    app.register_error_handler(ServiceError, handle_service_error)
    app.register_error_handler(ValidationError, handle_validation_error)

    @app.route('/uploads/<path:filename>')
    def uploaded_file(filename):
        return send_from_directory(app.config['UPLOAD_FOLDER'], filename)

    app.cli.add_command(init_db_command)
    app.cli.add_command(notify_command)

    return app


if __name__ == '__main__':
    app = create_app()
    init_db(app)
    # host='0.0.0.0' allows access from other devices on the network
    app.run(debug=app.config.get('DEBUG', False), host='0.0.0.0', port=5000, use_reloader=False)
