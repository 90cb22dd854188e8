"""Prometheus metrics for Chatty"""

from prometheus_client import Counter, Histogram

# ============================================================================
# File Processing Metrics
# ============================================================================

files_processed_total = Counter('chatty_files_processed_total', 'Total number of files reduced successfully')

files_failed_total = Counter(
    'chatty_files_failed_total',
    'Total number of files that could not be opened or read',
    ['policy'],  # fail_fast, best_effort
)

file_duration_seconds = Histogram(
    'chatty_file_duration_seconds',
    'Time spent reducing a single file',
    buckets=[0.001, 0.005, 0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0],
    # 1ms to 1 minute - small site dumps up to the largest ones
)


# ============================================================================
# Line Metrics
# ============================================================================

lines_read_total = Counter('chatty_lines_read_total', 'Total number of lines read from input files')

lines_skipped_total = Counter(
    'chatty_lines_skipped_total', 'Total number of lines that carried no question (empty or malformed)'
)


# ============================================================================
# Run Metrics
# ============================================================================

run_duration_seconds = Histogram(
    'chatty_run_duration_seconds',
    'Wall time of a whole corpus run',
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0, 120.0, 300.0, 600.0],
)
