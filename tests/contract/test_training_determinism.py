from neuralnet.core.network import Network
from neuralnet.training.controller import TrainingConfig, TrainingController

XOR_INPUTS = [[0.0, 0.0], [0.0, 1.0], [1.0, 0.0], [1.0, 1.0]]
XOR_TARGETS = [[0.0], [1.0], [1.0], [0.0]]


def _run(network: Network) -> tuple:
    controller = TrainingController(network, TrainingConfig(epochs=25))
    result = controller.train(XOR_INPUTS, XOR_TARGETS)
    return controller.into_network(), result


def test_controller_training_is_deterministic():
    start = Network.new([2, 3, 1], seed=123)
    first, first_result = _run(start.clone())
    second, second_result = _run(start.clone())
    assert first == second
    assert first_result.losses == second_result.losses


def test_controller_matches_network_train():
    start = Network.new([2, 3, 1], seed=9)
    via_network = start.clone()
    via_network.train(XOR_INPUTS, XOR_TARGETS, 25)
    via_controller, _ = _run(start.clone())
    assert via_controller == via_network
