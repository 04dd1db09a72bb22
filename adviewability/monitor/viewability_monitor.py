"""
Viewability Monitor - MRC viewable-impression state machine.

Samples an element on a fixed cadence and declares it viewable once enough
consecutive samples show the accepted share of its area on screen:
50% by default, 30% for large ad units, held for 900 ms at the default
100 ms cadence.
"""

from typing import Any, Callable

from adviewability.analyzers.css_visibility import is_css_invisible
from adviewability.analyzers.geometry import GeometryViewabilityCalculator
from adviewability.analyzers.occlusion import OcclusionDetector
from adviewability.config import Settings, settings as default_settings
from adviewability.errors import CrossOriginAccessError, ViewabilityError
from adviewability.geometry.frame_chain import FrameChain
from adviewability.host.base import ElementRef, HostEnvironment
from adviewability.monitor.scheduler import Scheduler
from adviewability.monitor.state import (
    CROSS_ORIGIN_ERROR,
    SampleOutcome,
    SampleResult,
    VisibilityCheckState,
)
from adviewability.utils.logger import get_logger

logger = get_logger(__name__)

StatusCallback = Callable[[VisibilityCheckState], None]


class ViewabilityMonitor:
    """
    Runs viewability checks for elements of one host.

    Each call to `check_viewability` starts an independent session with its
    own state, so several elements can be monitored at once.

    Each sample runs, in order:
    - CSS filter (hidden elements fail immediately)
    - Occlusion detector (covered elements fail immediately)
    - Geometry calculator (percentage inside every nested viewport)
    """

    def __init__(
        self,
        host: HostEnvironment,
        scheduler: Scheduler,
        config: Settings | None = None,
        debug_mode: bool | None = None,
    ):
        self.host = host
        self.scheduler = scheduler
        self.config = config or default_settings
        self.debug_mode = self.config.debug_mode if debug_mode is None else debug_mode

        self.geometry = GeometryViewabilityCalculator(host, self.config.max_frame_depth)
        self.occlusion = OcclusionDetector(host, self.config.occlusion_sample_inset)

    def check_viewability(
        self,
        element: ElementRef,
        status_callback: StatusCallback,
    ) -> "MonitoringSession":
        """Start monitoring an element; `status_callback` gets a state copy on every tick."""
        session = MonitoringSession(self, element, status_callback)
        session.start()
        return session

    def accepted_percentage_for(self, element_area: float) -> float:
        if element_area >= self.config.large_ad_area_threshold:
            return self.config.large_ad_viewable_percentage
        return self.config.default_viewable_percentage

    def measure_once(self, element: ElementRef) -> SampleResult:
        """Take a single sample outside any session."""
        rect = self.host.get_bounding_rect(element)
        return self.evaluate(element, self.accepted_percentage_for(rect.area))

    def evaluate(self, element: ElementRef, accepted_percentage: float) -> SampleResult:
        """
        Run the three checks for one sample.

        Raises:
            CrossOriginAccessError: a frame in the chain denied access
            ViewabilityError: the frame chain could not be walked
        """
        sample = SampleResult()

        if is_css_invisible(self.host, element):
            sample.percent_viewable = 0
            sample.outcome = SampleOutcome.CSS_HIDDEN
            return sample

        window = self.host.owner_window(element)
        if self.occlusion.is_dom_obscured(element, window, accepted_percentage, sample):
            sample.outcome = SampleOutcome.OBSCURED
            return sample

        chain = FrameChain.collect(self.host, window, self.config.max_frame_depth)
        geometry = self.geometry.get_viewability_state(element, chain=chain)
        sample.geometry = geometry
        if geometry.error:
            sample.error = geometry.error
            sample.outcome = SampleOutcome.GEOMETRY_ERROR
            return sample

        combined = geometry.percent_viewable - sample.percent_obscured
        sample.percent_viewable = min(100.0, max(0.0, combined))

        if sample.percent_viewable and sample.percent_viewable >= accepted_percentage:
            sample.outcome = SampleOutcome.PASS
        else:
            sample.outcome = SampleOutcome.BELOW_THRESHOLD
        return sample


class MonitoringSession:
    """
    One element being monitored.

    States: sampling until the consecutive-pass target is met, then
    viewable. In debug mode sampling continues after the verdict.
    """

    def __init__(
        self,
        monitor: ViewabilityMonitor,
        element: ElementRef,
        status_callback: StatusCallback,
    ):
        self.monitor = monitor
        self.element = element
        self.status_callback = status_callback
        self.state = VisibilityCheckState(
            accepted_viewable_percentage=monitor.config.default_viewable_percentage,
        )
        self._handle: Any = None
        self._threshold_revised = False

    @property
    def running(self) -> bool:
        return self._handle is not None

    @property
    def interval_ms(self) -> int:
        return self.monitor.config.poll_interval_ms

    def start(self) -> None:
        if self.running:
            return
        self.state.consecutive_pass_count = 0
        self._handle = self.monitor.scheduler.schedule_periodic(self.interval_ms, self.tick)
        logger.info(
            "Viewability session started",
            interval_ms=self.interval_ms,
            debug_mode=self.monitor.debug_mode,
        )

    def stop(self) -> None:
        if self._handle is None:
            return
        self.monitor.scheduler.cancel(self._handle)
        self._handle = None
        logger.info("Viewability session stopped", ticks=self.state.tick)

    def tick(self) -> None:
        """Take one sample, update the counters and report."""
        state = self.state
        state.tick += 1

        try:
            self._revise_threshold()
            sample = self.monitor.evaluate(self.element, state.accepted_viewable_percentage)
        except ViewabilityError as e:
            self._fail_permanently(e)
            return
        except Exception as e:
            logger.error("Viewability sample failed", tick=state.tick, error=str(e))
            self.stop()
            raise

        if sample.passed:
            state.consecutive_pass_count += 1
        else:
            state.consecutive_pass_count = 0

        state.percent_obscured = sample.percent_obscured
        state.percent_viewable = sample.percent_viewable if sample.percent_viewable is not None else 0
        state.last_outcome = sample.outcome
        state.error = sample.error
        state.duration = state.consecutive_pass_count * self.interval_ms

        logger.debug(
            "Viewability sample",
            tick=state.tick,
            outcome=sample.outcome.value,
            percent_viewable=state.percent_viewable,
            consecutive=state.consecutive_pass_count,
        )

        if state.consecutive_pass_count >= self.monitor.config.required_consecutive_passes:
            if not state.viewability_status:
                logger.info(
                    "Viewability verdict reached",
                    duration_ms=state.duration,
                    percent_viewable=state.percent_viewable,
                )
            state.viewability_status = True
            if not self.monitor.debug_mode:
                self.stop()

        self.status_callback(state.snapshot())

    def _revise_threshold(self) -> None:
        if self._threshold_revised:
            return
        area = self.monitor.host.get_bounding_rect(self.element).area
        if area >= self.monitor.config.large_ad_area_threshold:
            self.state.accepted_viewable_percentage = self.monitor.config.large_ad_viewable_percentage
            self._threshold_revised = True

    def _fail_permanently(self, error: ViewabilityError) -> None:
        state = self.state
        state.measurable = False
        state.consecutive_pass_count = 0
        state.duration = 0
        state.percent_viewable = 0
        if isinstance(error, CrossOriginAccessError):
            state.error = CROSS_ORIGIN_ERROR
            state.last_outcome = SampleOutcome.CROSS_ORIGIN
        else:
            state.error = str(error)
            state.last_outcome = SampleOutcome.GEOMETRY_ERROR

        logger.warning("Viewability cannot be measured", error=str(error))
        self.stop()
        self.status_callback(state.snapshot())
