# Wires the loaders, schedule builder and runtime simulator together.

import argparse
import logging
import time

from config_loader import load_config, build_cost_model
from loader import JSONProgramLoader, JSONAllocationLoader
from allocation import AllocationPlan
from compiler import ScheduleBuilder
from simulator import RuntimeSimulator

def main(argv=None):
    parser = argparse.ArgumentParser(description='Memory-tier runtime simulator (JSON-driven)')
    parser.add_argument('--program', type=str, required=True, help='Path to JSON program')
    parser.add_argument('--allocations', type=str, default='', help='Path to JSON allocation plan (empty: no cross-tier copies)')
    parser.add_argument('--config', type=str, default='configs/default.yaml', help='Hardware config (YAML)')
    parser.add_argument('--verbose', action='store_true', help='Log every simulated copy')
    args = parser.parse_args(argv)

    logging.basicConfig(format='%(asctime)s | %(message)s',
                        level=logging.DEBUG if args.verbose else logging.WARNING)

    config = load_config(args.config)
    cost_model = build_cost_model(config)

    program = JSONProgramLoader(default_dtype=config.get('program', {}).get('default_dtype', 'f32')).load(args.program)
    if args.allocations:
        plan = JSONAllocationLoader(program).load(args.allocations)
    else:
        plan = AllocationPlan()

    schedule = ScheduleBuilder(program).compile()

    t0 = time.time()
    sim = RuntimeSimulator(cost_model)
    total = sim.estimate(schedule, plan)
    stats = sim.stats

    print("\nSimulation result (JSON-driven program, two-tier memory):")
    print(f"Schedule items: {len(schedule)}")
    print(f"Allocations: {len(plan)}")
    print(f"Estimated elapsed time: {total:.6f} s")
    print(f"  compute: {stats.compute_time:.6f} s")
    print(f"  async copies: {stats.copy_time:.6f} s ({stats.num_copies_completed} completed, {stats.bytes_copied:.0f} bytes)")

    print('\nElapsed Time Breakdown (s):')
    for k, v in stats.breakdown.items():
        print(f'  {k}: {v:.6f}')

    leftover = sim.get_outstanding_read_default_queue() + sim.get_outstanding_write_default_queue()
    if leftover:
        print(f'\nCopies still outstanding at end of schedule: {", ".join(c.copy_start.name for c in leftover)}')
    print(f'\n(simulated in {time.time() - t0:.3f} s)')
    return total


if __name__ == '__main__':
    main()
