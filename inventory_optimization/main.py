import argparse
import sys

from tabulate import tabulate

from inventory_optimization.config import config
from inventory_optimization.db import db, session_scope
from inventory_optimization.logging_setup import get_logger
from inventory_optimization.exceptions import InventoryOptimizationError

def init_application(database_url=None):
    """Initialize application components."""
    db.initialize(database_url)
    
    log = get_logger('app')
    log.info("Inventory Optimization Engine initialized")
    log.info(f"Using {db.dialect_name} database from {database_url or config.get_db_url()}")
    
    return True

def _fmt(value, digits=2):
    if value is None:
        return '-'
    if isinstance(value, float):
        return f"{value:.{digits}f}"
    return value

def init_db(args):
    """Create the database schema."""
    from inventory_optimization.create_db_tables import create_tables
    return create_tables(args.drop, args.database_url)

def run_sweep(args):
    """Run the reorder sweep and print the reorder signals."""
    from inventory_optimization.services.reorder_service import ReorderService
    
    with session_scope() as session:
        result = ReorderService(session).run_reorder_sweep(args.tenant)
    
    signals = result['signals']
    if signals:
        table_data = [[
            s['item_id'],
            s['item_code'] or '-',
            s['item_name'],
            s['current_stock'],
            s['reorder_point'],
            s['units_below_rop'],
            _fmt(s['recommended_order_qty'])
        ] for s in signals]
        
        print(f"\nReorder Signals for tenant {args.tenant}:")
        print(tabulate(table_data, headers=['Item ID', 'Code', 'Name', 'Stock', 'ROP', 'Below ROP', 'Order Qty']))
    else:
        print(f"\nNo items at or below reorder point for tenant {args.tenant}")
    
    print(f"\nEvaluated: {result['evaluated']}, Signals: {len(signals)}, Failed: {len(result['failed_items'])}")
    for failure in result['failed_items']:
        print(f"  Item {failure['item_id']}: {failure['error']}")
    
    return True

def run_abc(args):
    """Run ABC classification and print the ranked items."""
    from inventory_optimization.services.abc_service import ABCAnalysisService
    
    with session_scope() as session:
        result = ABCAnalysisService(session).run_abc_analysis(args.tenant)
    
    if not result['success']:
        print(f"\nABC analysis not applied for tenant {args.tenant}: {result['reason']}")
        return False
    
    table_data = [[
        row['rank'],
        row['item_id'],
        row['item_name'],
        _fmt(row['annual_value']),
        f"{row['cumulative_percentage'] * 100:.1f}%",
        row['classification'],
        row['previous_classification'] or '-'
    ] for row in result['items']]
    
    print(f"\nABC Classification for tenant {args.tenant}:")
    print(tabulate(table_data, headers=['Rank', 'Item ID', 'Name', 'Annual Value', 'Cumulative', 'Class', 'Previous']))
    print(f"\nClassified: {result['classified_items']}, Unclassified: {result['unclassified_items']}, "
          f"Changed: {result['changed_items']}")
    print(f"Counts: A={result['class_counts']['A']}, B={result['class_counts']['B']}, C={result['class_counts']['C']}")
    
    return True

def show_eoq(args):
    """Print the EOQ cost breakdown of an item."""
    from inventory_optimization.services.reporting_service import ReportingService
    
    with session_scope() as session:
        breakdown = ReportingService(session).eoq_breakdown(args.item_id, args.tenant)
    
    print(f"\nEOQ for item {breakdown['item_id']} ({breakdown['item_name']}):")
    print(tabulate([
        ['Annual Demand', _fmt(breakdown['annual_demand'])],
        ['Ordering Cost', _fmt(breakdown['ordering_cost'])],
        ['Holding Cost', _fmt(breakdown['holding_cost'])],
        ['EOQ', _fmt(breakdown['eoq'])],
        ['Orders per Year', _fmt(breakdown['orders_per_year'])],
        ['Average Inventory', _fmt(breakdown['average_inventory'])],
        ['Annual Ordering Cost', _fmt(breakdown['annual_ordering_cost'])],
        ['Annual Holding Cost', _fmt(breakdown['annual_holding_cost'])],
        ['Total Inventory Cost', _fmt(breakdown['total_inventory_cost'])],
        ['Order Every (days)', _fmt(breakdown['recommended_order_frequency_days'], 1)]
    ], headers=['Metric', 'Value']))
    
    if breakdown['missing_inputs']:
        print(f"\nMissing inputs: {', '.join(breakdown['missing_inputs'])}")
    
    return True

def show_rop(args):
    """Print the reorder point breakdown of an item."""
    from inventory_optimization.services.reporting_service import ReportingService
    
    with session_scope() as session:
        breakdown = ReportingService(session).reorder_point_breakdown(args.item_id, args.tenant)
    
    print(f"\nReorder Point for item {breakdown['item_id']} ({breakdown['item_name']}):")
    print(tabulate([
        ['Average Daily Demand', _fmt(breakdown['average_daily_demand'], 4)],
        ['Lead Time (days)', _fmt(breakdown['lead_time_days'])],
        ['Demand Std Dev', _fmt(breakdown['demand_std_dev'], 4)],
        ['Service Level', _fmt(breakdown['service_level'], 3)],
        ['Z-Score', _fmt(breakdown['z_score'], 3)],
        ['Lead Time Demand', _fmt(breakdown['lead_time_demand'])],
        ['Safety Stock', _fmt(breakdown['safety_stock'])],
        ['Reorder Point', _fmt(breakdown['reorder_point'])],
        ['Implied Service Level', _fmt(breakdown['implied_service_level'], 4)],
        ['Current Stock', _fmt(breakdown['current_stock'])],
        ['Reorder Needed', 'Yes' if breakdown['reorder_needed'] else 'No']
    ], headers=['Metric', 'Value']))
    
    if breakdown['missing_inputs']:
        print(f"\nMissing inputs: {', '.join(breakdown['missing_inputs'])}")
    
    return True

def show_analytics(args):
    """Print demand statistics of an item."""
    from inventory_optimization.services.reporting_service import ReportingService
    
    with session_scope() as session:
        reporting = ReportingService(session)
        if args.history:
            samples = reporting.demand_statistics_history(args.item_id, args.tenant)
        else:
            samples = [reporting.latest_demand_statistics(args.item_id, args.tenant)]
    
    if not samples:
        print(f"\nNo demand statistics recorded for item {args.item_id}")
        return True
    
    table_data = [[
        s['period_start'],
        s['period_end'],
        s['total_demand'],
        _fmt(s['avg_daily_demand'], 3),
        _fmt(s['demand_std_dev'], 3),
        _fmt(s['coefficient_of_variation'], 3),
        s['demand_stability'] or '-'
    ] for s in samples]
    
    print(f"\nDemand statistics for item {args.item_id}:")
    print(tabulate(table_data, headers=['Start', 'End', 'Total', 'Avg/Day', 'Std Dev', 'CV', 'Stability']))
    
    return True

def main():
    """Main application entry point."""
    parser = argparse.ArgumentParser(description='Inventory Optimization Engine')
    parser.add_argument('--database-url', help='Override the configured database URL')
    
    subparsers = parser.add_subparsers(dest='command', help='Commands')
    
    init_parser = subparsers.add_parser('init-db', help='Create the database schema')
    init_parser.add_argument('--drop', action='store_true', help='Drop existing tables first')
    
    sweep_parser = subparsers.add_parser('sweep', help='Check items against their reorder points')
    sweep_parser.add_argument('tenant', help='Tenant ID')
    
    abc_parser = subparsers.add_parser('abc', help='Run ABC classification')
    abc_parser.add_argument('tenant', help='Tenant ID')
    
    for name, help_text in (('eoq', 'Show the EOQ cost breakdown of an item'),
                            ('rop', 'Show the reorder point breakdown of an item')):
        item_parser = subparsers.add_parser(name, help=help_text)
        item_parser.add_argument('tenant', help='Tenant ID')
        item_parser.add_argument('item_id', type=int, help='Item ID')
    
    analytics_parser = subparsers.add_parser('analytics', help='Show demand statistics of an item')
    analytics_parser.add_argument('tenant', help='Tenant ID')
    analytics_parser.add_argument('item_id', type=int, help='Item ID')
    analytics_parser.add_argument('--history', action='store_true', help='Show all recorded periods')
    
    args = parser.parse_args()
    
    commands = {
        'init-db': init_db,
        'sweep': run_sweep,
        'abc': run_abc,
        'eoq': show_eoq,
        'rop': show_rop,
        'analytics': show_analytics
    }
    
    if args.command is None:
        parser.print_help()
        return 1
    
    if args.command == 'init-db':
        return 0 if init_db(args) else 1
    
    init_application(args.database_url)
    
    try:
        return 0 if commands[args.command](args) else 1
    except InventoryOptimizationError as e:
        get_logger('cli').error(str(e))
        print(f"\nError: {e}")
        return 1

if __name__ == "__main__":
    sys.exit(main())
