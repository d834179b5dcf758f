import os
import re
import subprocess
import sys
import pytest


REPO_ROOT = os.path.dirname(os.path.dirname(__file__))


def run_cli(*args):
    return subprocess.run(
        [sys.executable, os.path.join(REPO_ROOT, 'schedsim.py'), *args],
        capture_output=True,
        text=True,
        cwd=REPO_ROOT,
        check=False,
    )


def summary(stdout):
    values = {}
    for label in ('Avg Waiting Time', 'Avg Turnaround Time', 'Avg Response Time',
                  'Ticks CPU Idle', 'Total Ticks CPU', 'Total CPU Usage', 'CPU Throughput'):
        values[label] = [float(v) for v in re.findall(rf"^{label}\s+([\d.]+)", stdout, re.MULTILINE)]
    return values


def test_cpu_bound_sjf_summary():
    result = run_cli('sjf', '-w', 'examples/cpu_bound.proc')
    assert result.returncode == 0, result.stderr
    values = summary(result.stdout)
    assert values['Avg Waiting Time'] == [1.5]
    assert values['Avg Turnaround Time'] == [5.5]
    assert values['Avg Response Time'] == [1.5]
    assert values['Ticks CPU Idle'] == [0]
    assert values['Total Ticks CPU'] == [8]
    assert values['Total CPU Usage'] == [100.0]
    assert values['CPU Throughput'] == [0.25]
    assert '0\tCPU\t\tP2[Sched]' in result.stdout
    assert '3\tCPU\t\tP1[Sched]' in result.stdout


@pytest.mark.parametrize(
    'args,headers',
    [
        ((), ['shortest-job-first']),
        (('rr',), ['round-robin (quantum 5)']),
        (('srtf', 'vrr'), ['shortest-remaining-time-first', 'variable-round-robin (quantum 5)']),
        (('round-robin', '-q', '2'), ['round-robin (quantum 2)']),
        (('rr', '-c', 'examples/sysconfig.txt'), ['round-robin (quantum 3)']),
        (('rr', '-c', 'examples/sysconfig.txt', '-q', '7'), ['round-robin (quantum 7)']),
        (('sjf', 'srtf', 'rr', 'vrr'), ['shortest-job-first', 'shortest-remaining-time-first',
                                        'round-robin (quantum 5)', 'variable-round-robin (quantum 5)']),
    ],
)
def test_discipline_selection(args, headers):
    result = run_cli(*args, '-w', 'examples/procs.proc', '--no-trace')
    assert result.returncode == 0, result.stderr
    assert re.findall(r"^=== (.+) ===$", result.stdout, re.MULTILINE) == headers
    assert 'Time (tick)' not in result.stdout
    # every run busies the CPU for exactly the 26 ticks of work in the file
    values = summary(result.stdout)
    assert len(values['Total Ticks CPU']) == len(headers)
    for total, idle in zip(values['Total Ticks CPU'], values['Ticks CPU Idle']):
        assert total - idle == 26


def test_repeated_discipline_gives_identical_reports():
    result = run_cli('vrr', 'vrr', '-w', 'examples/procs.proc')
    assert result.returncode == 0, result.stderr
    blocks = [b.strip() for b in re.split(r'^(?==== )', result.stdout, flags=re.MULTILINE) if b.strip()]
    assert len(blocks) == 2
    assert blocks[0] == blocks[1]


def test_unknown_discipline_exits_before_simulating():
    result = run_cli('sjf', 'fifo', '-w', 'examples/procs.proc')
    assert result.returncode == 2
    assert result.stdout == ''
    assert 'unknown discipline' in result.stderr


def test_malformed_workload_is_fatal():
    result = run_cli('sjf', 'rr', '-w', 'examples/malformed.proc')
    assert result.returncode == 1
    assert result.stdout == ''
    assert result.stderr.startswith('error: ')
    assert 'malformed.proc:2' in result.stderr


def test_missing_workload_is_fatal():
    result = run_cli('-w', 'examples/does-not-exist.proc')
    assert result.returncode == 1
    assert result.stdout == ''
    assert 'unable to read' in result.stderr


def test_zero_quantum_is_fatal():
    result = run_cli('sjf', 'rr', '-q', '0', '-w', 'examples/procs.proc')
    assert result.returncode == 1
    assert result.stdout == ''
    assert 'time quantum' in result.stderr


def test_undecodable_workload_reports_error(tmp_path):
    path = tmp_path / 'bad.proc'
    path.write_bytes(b'P1;0;5;0;100\n\xff\xfe;0;3;0;1\n')
    result = run_cli('-w', str(path))
    assert result.returncode == 1
    assert result.stdout == ''
    assert result.stderr.startswith('error: unable to read')
    assert 'Traceback' not in result.stderr


def test_disciplines_may_follow_options():
    result = run_cli('sjf', '-w', 'examples/procs.proc', 'rr', '--no-trace', 'vrr')
    assert result.returncode == 0, result.stderr
    assert re.findall(r"^=== (.+) ===$", result.stdout, re.MULTILINE) == [
        'shortest-job-first', 'round-robin (quantum 5)', 'variable-round-robin (quantum 5)']


def test_empty_delimiter_is_not_replaced_by_default():
    result = run_cli('-w', 'examples/procs.proc', '-d', '')
    assert result.returncode == 1
    assert result.stdout == ''
    assert 'single character' in result.stderr
