from .reorder_sweep_job import run_reorder_sweep_job
from .abc_analysis_job import run_abc_analysis_job

__all__ = [
    'run_reorder_sweep_job',
    'run_abc_analysis_job'
]
