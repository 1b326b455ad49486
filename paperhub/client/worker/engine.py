import logging
import threading
from typing import Callable, Iterator, List, Protocol

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[float, str], None]
StopCheck = Callable[[], bool]


class ModelEngine(Protocol):
    """The in-process model runtime driven by the worker thread."""

    def load(self, model_id: str, on_progress: ProgressCallback) -> None:
        ...

    def generate(self, messages: List[dict], should_stop: StopCheck) -> Iterator[str]:
        ...


class TransformersEngine:
    """
    Hugging Face `transformers` chat model.

    Tokens are produced by `model.generate` on a helper thread and read back
    through a `TextIteratorStreamer`; `should_stop` is polled as a stopping
    criterion so an abort ends generation at the next token.
    """

    def __init__(self, max_new_tokens: int = 1024, temperature: float = 0.7):
        self.max_new_tokens = max_new_tokens
        self.temperature = temperature
        self._model = None
        self._tokenizer = None

    def load(self, model_id: str, on_progress: ProgressCallback) -> None:
        from transformers import AutoModelForCausalLM, AutoTokenizer

        on_progress(0.0, f"Loading tokenizer for {model_id}")
        self._tokenizer = AutoTokenizer.from_pretrained(model_id)
        on_progress(30.0, f"Loading weights for {model_id}")
        self._model = AutoModelForCausalLM.from_pretrained(model_id, torch_dtype="auto")
        self._model.eval()
        on_progress(100.0, f"{model_id} loaded")

    def generate(self, messages: List[dict], should_stop: StopCheck) -> Iterator[str]:
        from transformers import StoppingCriteria, StoppingCriteriaList, TextIteratorStreamer

        if self._model is None:
            raise RuntimeError("The model has not been loaded yet.")

        class _Interrupt(StoppingCriteria):
            def __call__(self, input_ids, scores, **kwargs):
                return should_stop()

        inputs = self._tokenizer.apply_chat_template(
            messages, add_generation_prompt=True, return_tensors="pt", return_dict=True
        ).to(self._model.device)
        streamer = TextIteratorStreamer(self._tokenizer, skip_prompt=True, skip_special_tokens=True)
        kwargs = dict(
            **inputs,
            streamer=streamer,
            max_new_tokens=self.max_new_tokens,
            do_sample=self.temperature > 0,
            stopping_criteria=StoppingCriteriaList([_Interrupt()]),
        )
        if self.temperature > 0:
            kwargs["temperature"] = self.temperature

        failure = []

        def _run():
            try:
                self._model.generate(**kwargs)
            except Exception as e:
                failure.append(e)
                streamer.end()

        thread = threading.Thread(target=_run, daemon=True)
        thread.start()
        for text in streamer:
            if text:
                yield text
        thread.join()
        if failure:
            raise failure[0]
