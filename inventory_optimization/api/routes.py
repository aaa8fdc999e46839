"""
Routes for inventory optimization in the clinic inventory system.

This module provides API endpoints for EOQ and reorder point breakdowns,
ABC classification runs, reorder monitoring, demand statistics and
reorder parameter updates. Every endpoint is scoped to one tenant.
"""
from flask import Blueprint, jsonify, request, current_app

from inventory_optimization.db import session_scope
from inventory_optimization.models import ABCClassification
from inventory_optimization.services import (
    ItemService,
    ABCAnalysisService,
    ReorderService,
    ReportingService
)
from inventory_optimization.utils.math_utils import to_float
from inventory_optimization.exceptions import (
    InventoryOptimizationError,
    ValidationError,
    NotFoundError
)

optimization_bp = Blueprint(
    'inventory_optimization',
    __name__,
    url_prefix='/api/v1/tenants/<tenant_id>/inventory/optimization'
)

def _status_for(error):
    if isinstance(error, ValidationError):
        return 400
    if isinstance(error, NotFoundError):
        return 404
    return 500

def _item_to_dict(item):
    return {
        'item_id': item.id,
        'tenant_id': item.tenant_id,
        'item_code': item.item_code,
        'item_name': item.item_name,
        'current_stock': item.current_stock,
        'unit_price': to_float(item.unit_price),
        'annual_demand': item.annual_demand,
        'ordering_cost': to_float(item.ordering_cost),
        'holding_cost': to_float(item.holding_cost),
        'lead_time_days': item.lead_time_days,
        'demand_std_dev': item.demand_std_dev,
        'service_level': item.service_level,
        'economic_order_quantity': item.economic_order_quantity,
        'safety_stock': item.safety_stock,
        'reorder_point': item.reorder_point,
        'abc_classification': item.abc_classification.value if item.abc_classification else None
    }

@optimization_bp.errorhandler(InventoryOptimizationError)
def handle_engine_error(error):
    """Render engine errors as JSON."""
    status = _status_for(error)
    if status == 500:
        current_app.logger.error(f"Inventory optimization error: {error}")
    
    return jsonify({
        'success': False,
        'error': error.to_dict()
    }), status

@optimization_bp.route('/eoq/<int:item_id>', methods=['GET'])
def get_eoq(tenant_id, item_id):
    """Get the EOQ and its cost breakdown for an item."""
    with session_scope() as session:
        breakdown = ReportingService(session).eoq_breakdown(item_id, tenant_id)
    
    return jsonify({
        'success': True,
        'eoq': breakdown
    })

@optimization_bp.route('/rop/<int:item_id>', methods=['GET'])
def get_reorder_point(tenant_id, item_id):
    """Get the reorder point, safety stock and z-score for an item."""
    with session_scope() as session:
        breakdown = ReportingService(session).reorder_point_breakdown(item_id, tenant_id)
    
    return jsonify({
        'success': True,
        'reorder_point': breakdown
    })

@optimization_bp.route('/abc-analysis', methods=['POST'])
def run_abc_analysis(tenant_id):
    """Run ABC classification for the tenant's catalog."""
    with session_scope() as session:
        result = ABCAnalysisService(session).run_abc_analysis(tenant_id)
    
    return jsonify(result)

@optimization_bp.route('/abc/<classification>', methods=['GET'])
def get_items_by_classification(tenant_id, classification):
    """Get the items of one ABC class, highest annual value first."""
    try:
        abc_class = ABCClassification.from_string(classification)
    except ValueError as e:
        raise ValidationError(
            str(e), code='INVALID_CLASSIFICATION',
            details={'classification': 'must be one of A, B, C'}
        )
    
    with session_scope() as session:
        items = ReportingService(session).items_by_classification(tenant_id, abc_class)
    
    return jsonify({
        'success': True,
        'classification': abc_class.value,
        'description': abc_class.description,
        'items': items,
        'count': len(items)
    })

@optimization_bp.route('/reorder-needed', methods=['GET'])
def get_reorder_needed(tenant_id):
    """Get items with current stock at or below their reorder point."""
    with session_scope() as session:
        items = ReportingService(session).items_below_reorder_point(tenant_id)
    
    return jsonify({
        'success': True,
        'items': items,
        'count': len(items)
    })

@optimization_bp.route('/reorder-sweep', methods=['POST'])
def run_reorder_sweep(tenant_id):
    """Run the reorder point sweep for the tenant's catalog."""
    with session_scope() as session:
        result = ReorderService(session).run_reorder_sweep(tenant_id)
    
    return jsonify(result)

@optimization_bp.route('/analytics/<int:item_id>', methods=['GET'])
def get_demand_statistics(tenant_id, item_id):
    """Get the most recent demand statistics for an item."""
    with session_scope() as session:
        statistics = ReportingService(session).latest_demand_statistics(item_id, tenant_id)
    
    return jsonify({
        'success': True,
        'statistics': statistics
    })

@optimization_bp.route('/analytics/<int:item_id>/history', methods=['GET'])
def get_demand_statistics_history(tenant_id, item_id):
    """Get all demand statistics for an item, most recent first."""
    with session_scope() as session:
        history = ReportingService(session).demand_statistics_history(item_id, tenant_id)
    
    return jsonify({
        'success': True,
        'history': history,
        'count': len(history)
    })

@optimization_bp.route('/items/<int:item_id>/parameters', methods=['PUT'])
def update_item_parameters(tenant_id, item_id):
    """Update reorder parameters of an item and return the recomputed item."""
    params = request.get_json(silent=True)
    if not isinstance(params, dict) or not params:
        raise ValidationError(
            "Request body must be a non-empty JSON object",
            code='INVALID_DATA',
            details={'body': 'expected a JSON object of parameter values'}
        )
    
    ItemService.check_writable(params)
    
    with session_scope() as session:
        item = ItemService(session).update_parameters(item_id, tenant_id, **params)
        updated = _item_to_dict(item)
    
    return jsonify({
        'success': True,
        'item': updated
    })
