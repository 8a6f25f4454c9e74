"""
DeckLab Engine
==============

Central orchestrator for DeckLab. The :class:`DeckLabEngine` wires the
transformation generator, the deck engine and the isomorph analyzer to
the shared configuration and logging layers, and turns isomorph reports
into :class:`~shared.models.AnalysisResult` objects with findings.

The engine is a facade (Gamma et al., 1994); every operation delegates
to the pure functions in :mod:`decklab.analyzers` and is synchronous.

References:
    - Gamma, E., Helm, R., Johnson, R., & Vlissides, J. (1994).
      Design Patterns: Elements of Reusable Object-Oriented Software.
"""

from __future__ import annotations

from typing import Optional

from shared.config import DeckLabConfig
from shared.logger import DeckLabLogger
from shared.models import AnalysisResult, Finding, Severity

from decklab.analyzers.deck import encipher
from decklab.analyzers.frequency import FrequencyAnalyzer
from decklab.analyzers.generator import (
    InfeasibleConfigError,
    TransformationGenerator,
    generate_sliding_window_mapping,
)
from decklab.analyzers.isomorph import IsomorphAnalyzer, isomorph_interestingness
from decklab.core.models import (
    CipherConfig,
    CipherMapping,
    EncipherResult,
    Isomorph,
    IsomorphReport,
)

# Patterns seen at least this many times are reported individually
RECURRING_PATTERN_MIN = 3
# Cap on individually reported recurring patterns
RECURRING_PATTERN_LIMIT = 5
# Letters required before the IC is considered meaningful
IC_MIN_LENGTH = 20
# IC above this suggests plaintext statistics leaking through
IC_ELEVATED = 0.055

_ISOMORPH_REFERENCES = [
    "Kahn, D. (1996). The Codebreakers. Scribner.",
    "Friedman, W. F. (1923). Elements of Cryptanalysis.",
]


class DeckLabEngine:
    """Orchestrates mapping generation, encipherment and isomorph analysis.

    Usage::

        engine = DeckLabEngine()
        mapping = engine.build_mapping(seed=7)
        enciphered = engine.encipher("attack at dawn", mapping)
        result = engine.analyze_isomorphs(enciphered.ciphertext)

    Attributes:
        config: DeckLab configuration instance.
        logger: Logger for the engine.
    """

    def __init__(
        self,
        config: Optional[DeckLabConfig] = None,
        logger: Optional[DeckLabLogger] = None,
    ) -> None:
        self.config = config or DeckLabConfig()
        settings = self.config.global_settings
        self.logger = logger or DeckLabLogger(
            "engine",
            log_level=settings.log_level,
            log_file=settings.log_file,
            json_logs=settings.log_json,
        )

        self._generator = TransformationGenerator(
            max_attempts=self.config.generator.max_attempts or None,
        )
        self._isomorph_analyzer = IsomorphAnalyzer(
            rank_by_count=self.config.analysis.rank_by_count,
        )

    # ------------------------------------------------------------------ #
    #  Mapping generation
    # ------------------------------------------------------------------ #

    def build_mapping(
        self,
        seed: Optional[int] = None,
        cipher_config: Optional[CipherConfig] = None,
        sliding_window: Optional[bool] = None,
    ) -> CipherMapping:
        """Build a cipher mapping, falling back to configured defaults.

        Raises:
            InfeasibleConfigError: The configuration cannot yield 26
                distinct transformations.
            MappingExhaustedError: A configured attempt limit was exceeded.
        """
        settings = self.config.generator
        if sliding_window is None:
            sliding_window = settings.sliding_window

        if sliding_window:
            self.logger.info("Building sliding-window mapping")
            return generate_sliding_window_mapping()

        if seed is None:
            seed = settings.seed
        if cipher_config is None:
            cipher_config = settings.to_cipher_config()

        with self.logger.operation("generate_mapping"):
            try:
                mapping = self._generator.generate(seed, cipher_config)
            except InfeasibleConfigError as exc:
                self.logger.error(f"Infeasible cipher configuration: {exc}")
                raise

            for letter in self._generator.slow_letters:
                self.logger.warning(
                    f"Letter {letter} needed {self._generator.rejections[letter] + 1} "
                    f"draws to find an unused transformation"
                )
            self.logger.debug(
                f"Rejected {self._generator.total_rejections} duplicate candidates",
                rejections=self._generator.rejections,
            )
            self.logger.info(
                f"Generated mapping: seed={seed}, swap_count={cipher_config.swap_count}, "
                f"rotation={cipher_config.rotation_mode.value}"
            )
        return mapping

    # ------------------------------------------------------------------ #
    #  Encipherment
    # ------------------------------------------------------------------ #

    def encipher(self, plaintext: str, mapping: CipherMapping) -> EncipherResult:
        """Encipher *plaintext* under *mapping* from the identity deck."""
        with self.logger.operation("encipher"):
            result = encipher(plaintext, mapping)
            skipped = len(plaintext) - len(result.steps)
            self.logger.info(
                f"Enciphered {len(result.steps)} letters ({skipped} characters skipped)"
            )
        return result

    # ------------------------------------------------------------------ #
    #  Isomorph analysis
    # ------------------------------------------------------------------ #

    def analyze_isomorphs(
        self,
        ciphertext: str,
        rank_by_count: Optional[bool] = None,
    ) -> AnalysisResult:
        """Find, rank and summarise isomorphs in *ciphertext*.

        The returned result carries the full :class:`IsomorphReport` dump
        in ``metadata`` and one finding per notable observation.

        Args:
            ciphertext: Text to search.
            rank_by_count: Override the configured secondary ranking key.
        """
        analyzer = self._isomorph_analyzer
        if rank_by_count is not None and rank_by_count != analyzer.rank_by_count:
            analyzer = IsomorphAnalyzer(rank_by_count=rank_by_count)

        result = AnalysisResult(tool_name="isomorph", target=ciphertext)

        with self.logger.operation("find_isomorphs"):
            with self.logger.timed(f"isomorph search over {len(ciphertext)} characters"):
                report = analyzer.analyze(ciphertext)
            result.metadata = report.model_dump()
            self.logger.info(
                f"Found {report.total} isomorphs across {len(report.pattern_counts)} patterns"
            )

        result.add_finding(Finding(
            title="Isomorph Analysis Complete",
            description=(
                f"Scanned {len(ciphertext)} characters: {report.total} isomorph "
                f"pairs across {len(report.pattern_counts)} distinct patterns."
            ),
            severity=Severity.INFO,
            evidence={
                "isomorphs": report.total,
                "patterns": len(report.pattern_counts),
            },
            references=_ISOMORPH_REFERENCES,
        ))

        if not report.isomorphs:
            result.add_finding(Finding(
                title="No Isomorphs Found",
                description=(
                    "No pair of non-overlapping windows shares a repetition "
                    "pattern that starts and ends on a repeated letter."
                ),
                severity=Severity.INFO,
                recommendation="Collect more ciphertext; windows need at least 6 letters.",
            ))
        else:
            result.add_finding(self._strongest_finding(report, report.isomorphs[0]))

        for finding in self._recurring_findings(report):
            result.add_finding(finding)

        ic_finding = self._ic_finding(report)
        if ic_finding is not None:
            result.add_finding(ic_finding)

        return result.finalize(
            f"{report.total} isomorphs in {len(ciphertext)} characters"
            + (
                f"; strongest pattern {report.isomorphs[0].pattern}"
                if report.isomorphs
                else ""
            )
        )

    def run(
        self,
        plaintext: str,
        seed: Optional[int] = None,
        cipher_config: Optional[CipherConfig] = None,
        sliding_window: Optional[bool] = None,
    ) -> tuple[CipherMapping, EncipherResult, AnalysisResult]:
        """Build a mapping, encipher *plaintext*, and analyse the ciphertext."""
        mapping = self.build_mapping(seed, cipher_config, sliding_window)
        enciphered = self.encipher(plaintext, mapping)
        return mapping, enciphered, self.analyze_isomorphs(enciphered.ciphertext)

    # ------------------------------------------------------------------ #
    #  Finding builders
    # ------------------------------------------------------------------ #

    @staticmethod
    def _strongest_finding(report: IsomorphReport, iso: Isomorph) -> Finding:
        score = isomorph_interestingness(iso.pattern)
        if score >= 1.0:
            severity = Severity.MEDIUM
        elif score >= 0.5:
            severity = Severity.LOW
        else:
            severity = Severity.INFO

        n = iso.length
        window_a = report.ciphertext[iso.start_a : iso.start_a + n]
        window_b = report.ciphertext[iso.start_b : iso.start_b + n]
        return Finding(
            title="Strongest Isomorph",
            description=(
                f"Pattern {iso.pattern} ({score:.0%} repeated) links "
                f"{window_a} at offset {iso.start_a} with {window_b} at offset "
                f"{iso.start_b}."
            ),
            severity=severity,
            evidence={
                "pattern": iso.pattern,
                "start_a": iso.start_a,
                "start_b": iso.start_b,
                "interestingness": round(score, 4),
                "occurrences": report.pattern_counts.get(iso.pattern, 0),
            },
            recommendation=(
                "Check whether the two windows could encipher the same plaintext "
                "fragment; the offset difference hints at the key-state period."
            ),
        )

    @staticmethod
    def _recurring_findings(report: IsomorphReport) -> list[Finding]:
        recurring = sorted(
            (
                (pattern, count)
                for pattern, count in report.pattern_counts.items()
                if count >= RECURRING_PATTERN_MIN
            ),
            key=lambda item: (-item[1], -len(item[0]), item[0]),
        )
        findings = []
        for pattern, count in recurring[:RECURRING_PATTERN_LIMIT]:
            offsets = sorted(
                {iso.start_a for iso in report.isomorphs if iso.pattern == pattern}
                | {iso.start_b for iso in report.isomorphs if iso.pattern == pattern}
            )
            findings.append(Finding(
                title="Recurring Pattern",
                description=(
                    f"Pattern {pattern} forms {count} isomorph pairs at offsets "
                    f"{', '.join(str(o) for o in offsets)}."
                ),
                severity=Severity.LOW,
                evidence={"pattern": pattern, "count": count, "offsets": offsets},
            ))
        return findings

    @staticmethod
    def _ic_finding(report: IsomorphReport) -> Optional[Finding]:
        profile = report.profile
        if profile.length < IC_MIN_LENGTH or profile.index_of_coincidence <= IC_ELEVATED:
            return None
        return Finding(
            title="Elevated Index of Coincidence",
            description=(
                f"IC {profile.index_of_coincidence:.4f} is well above the random "
                f"letter baseline of {FrequencyAnalyzer.IC_RANDOM_26:.4f}; "
                f"letter frequencies are uneven."
            ),
            severity=Severity.LOW,
            evidence={
                "index_of_coincidence": round(profile.index_of_coincidence, 6),
                "most_common": profile.most_common,
            },
            references=[
                "Friedman, W. F. (1922). The Index of Coincidence and Its "
                "Applications in Cryptanalysis.",
            ],
        )
