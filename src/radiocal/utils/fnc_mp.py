import multiprocessing as mp
from queue import Empty as QueueEmpty
from typing import Union, Generator, Callable


def _worker(worker_fnc: Callable, params_mp: mp.Queue, collect_mp: mp.Queue, args: list) -> None:
	while True:
		try:
			params = params_mp.get(timeout=10)
		except QueueEmpty:
			return
		collect_mp.put(worker_fnc(params, *args))


def get_cpu_count(max_cpus: int = -1, todo: int = None) -> int:
	"""
	Number of worker processes to start.
	
	Uses all but one of the available CPUs, at most max_cpus (if > 0) and at most todo (if given), and at least one.
	"""
	n_cpus = max(1, mp.cpu_count() - 1)
	if max_cpus > 0:
		n_cpus = min(n_cpus, max_cpus)
	if todo is not None:
		n_cpus = min(n_cpus, todo)
	return max(1, n_cpus)


def process_mp(worker_fnc: Callable, params_list: Union[list, Generator], worker_args: list = [],
			   collect_fnc: Callable = None, collect_args: list = [], max_cpus: int = -1) -> None:
	"""
	Process multiple tasks in parallel using multiprocessing.

	Applies the worker function to each set of parameters in a pool of worker processes. Results are passed
	to the collector function in the order in which they are completed.

	Parameters:
	worker_fnc (Callable): The worker function, called as worker_fnc(params, *worker_args). It must be picklable
		(defined at module level) and should not raise; wrap failures in the returned value instead.
	params_list (list or generator): Sets of parameters to apply the worker function to.
	worker_args (list, optional): Additional arguments to pass to the worker function.
	collect_fnc (Callable, optional): Called as collect_fnc(result, *collect_args) for each result.
	collect_args (list, optional): Additional arguments to pass to the collector function.
	max_cpus (int, optional): The maximum number of CPUs to use. Default is -1 (all available CPUs but one).

	Returns:
	None
	
	Raises:
	RuntimeError: If all worker processes terminate before every task is done.
	"""
	
	params_mp = mp.Queue()
	todo = 0
	for params in params_list:
		params_mp.put(params)
		todo += 1
	if not todo:
		return
	
	n_cpus = get_cpu_count(max_cpus, todo)
	collect_mp = mp.Queue()
	
	procs = []
	for _ in range(n_cpus):
		procs.append(mp.Process(target=_worker, args=(worker_fnc, params_mp, collect_mp, worker_args)))
		procs[-1].start()
	done = 0
	try:
		while done < todo:
			try:
				data = collect_mp.get(timeout=0.5)
			except QueueEmpty:
				if not any(proc.is_alive() for proc in procs):
					raise RuntimeError("All worker processes terminated with %d of %d tasks done" % (done, todo))
				continue
			done += 1
			if collect_fnc is not None:
				collect_fnc(data, *collect_args)
	finally:
		for proc in procs:
			proc.terminate()
			proc.join()
