# expense_tracker/expenses.py
import logging
import math

import pandas as pd
from flask import Blueprint, Response, current_app, jsonify, request
from flask_jwt_extended import current_user, jwt_required

from . import store
from .errors import NotFoundError, ValidationError
from .validation import validate_expense, validate_list_filters

logger = logging.getLogger("expense-tracker")

expenses_bp = Blueprint("expenses", __name__)

EXPORT_COLUMNS = ["date", "description", "category", "amount", "payment_method", "notes"]


@expenses_bp.route("", methods=["GET"])
@jwt_required()
def list_expenses():
    filters, error = validate_list_filters(
        request.args,
        default_limit=current_app.config['PAGE_SIZE'],
        max_limit=current_app.config['MAX_PAGE_SIZE'],
    )
    if error:
        raise ValidationError(error)

    expenses, total = store.list_records(current_user.id, **filters)
    return jsonify({
        "expenses": [e.to_dict() for e in expenses],
        "total": total,
        "total_pages": math.ceil(total / filters['limit']),
        "current_page": filters['page'],
    })


@expenses_bp.route("", methods=["POST"])
@jwt_required()
def add_expense():
    data, error = validate_expense(request.get_json(silent=True))
    if error:
        raise ValidationError(error)

    expense = store.create_record(current_user.id, data)
    logger.info(f"Expense {expense.id} created for user {current_user.id}: {expense.amount} {expense.category}")
    return jsonify(expense.to_dict()), 201


@expenses_bp.route("/<int:expense_id>", methods=["DELETE"])
@jwt_required()
def delete_expense(expense_id):
    if not store.delete_record(current_user.id, expense_id):
        logger.warning(f"Expense {expense_id} not found for user {current_user.id}")
        raise NotFoundError("Expense not found")

    logger.info(f"🗑️ Expense {expense_id} deleted for user {current_user.id}")
    return jsonify({"msg": "Expense deleted successfully", "deleted_id": expense_id})


@expenses_bp.route("/export", methods=["GET"])
@jwt_required()
def export_expenses():
    """Download the filtered expenses as CSV."""
    filters, error = validate_list_filters(request.args, paginate=False)
    if error:
        raise ValidationError(error)

    expenses = store.all_records(current_user.id, **filters)
    frame = pd.DataFrame([e.to_dict() for e in expenses], columns=EXPORT_COLUMNS)

    generated = current_app.config['CLOCK']()
    filename = f"expenses_{generated:%Y%m%d_%H%M%S}.csv"
    return Response(
        frame.to_csv(index=False),
        mimetype="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
