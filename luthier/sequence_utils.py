import typing


def euclidean_pattern (steps: int, pulses: int) -> typing.List[bool]:

	"""
	Distribute pulses as evenly as possible across steps.

	Uses Bresenham's line algorithm rather than Bjorklund's recursion. The
	accumulator starts one pulse short of overflowing so the first step is
	always a hit, which gives the familiar downbeat-first rotation (E(3, 8) is
	the tresillo ``x..x..x.``). The same ``(steps, pulses)`` pair always gives
	the same pattern.

	Out-of-range input (``pulses > steps``, ``pulses < 0`` or ``steps <= 0``)
	yields a silent pattern of length ``steps``.

	Example:
		```python
		euclidean_pattern(8, 3)   # → [T, F, F, T, F, F, T, F]
		euclidean_pattern(16, 4)  # hits on steps 0, 4, 8 and 12
		```
	"""

	if pulses > steps or pulses < 0 or steps <= 0:
		return [False] * max(steps, 0)

	if pulses == steps:
		return [True] * steps

	if pulses == 0:
		return [False] * steps

	sequence = []
	error = steps - pulses

	for _ in range(steps):
		error += pulses
		if error >= steps:
			sequence.append(True)
			error -= steps
		else:
			sequence.append(False)

	return sequence


def sequence_to_indices (sequence: typing.Sequence[bool]) -> typing.List[int]:

	"""Extract step indices where hits occur in a binary sequence."""

	return [i for i, v in enumerate(sequence) if v]
