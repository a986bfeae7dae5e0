from tubeplay.ui.workers import WORKER_FAILED, Worker, WorkerError


def test_worker_success() -> None:
    worker = Worker(lambda value: value * 2, 5)
    results = []
    worker.signals.finished.connect(lambda value: results.append(value))
    worker.run()
    assert results == [10]


def test_worker_error() -> None:
    def boom():
        raise RuntimeError("fail")

    worker = Worker(boom, context="unit")
    errors = []
    finished = []
    worker.signals.error.connect(lambda err: errors.append(err))
    worker.signals.finished.connect(lambda value: finished.append(value))
    worker.run()
    assert isinstance(errors[0], WorkerError)
    assert errors[0].context == "unit"
    assert errors[0].message == "fail"
    assert errors[0].exc_type == "RuntimeError"
    assert finished == [WORKER_FAILED]
