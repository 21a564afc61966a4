"""
NEAT Evolution Module

This module defines the Evolution engine, which drives a complete run of the
NEAT algorithm with joblib-based parallel fitness evaluation.

Each generation goes through three phases:
    EVALUATE:  decode every genome and compute its fitness with the evaluation function
    SPECIATE:  assign every genome to the first compatible species
    REPRODUCE: let the species' survivors produce the next generation
"""

import copy
import logging
import numpy as np
from itertools  import count
from joblib     import Parallel, delayed
from statistics import mean
from typing     import Callable, TYPE_CHECKING

from evoneat.genotype import Genome, InnovationTracker
from evoneat.pool     import MutationReproduction, Population, Reproduction, Species, SpeciesManager
from evoneat.run.config import Config

if TYPE_CHECKING:
    from evoneat.phenotype import NeuralNetwork

logger = logging.getLogger(__name__)

EvaluationFunc = Callable[['NeuralNetwork'], float]

def _evaluate_genome(genome: Genome, evaluation: EvaluationFunc) -> float:
    return genome.evaluate(evaluation)

class Evolution:
    """
    The NEAT evolution engine.

    The engine owns the configuration, the population, the list of species and
    the evaluation function. Upon creation it builds the initial population and
    seeds the species list with one species, represented by a randomly chosen
    genome. 'run()' then repeats evaluation, speciation and reproduction for
    'config.num_generations' generations.

    All randomness comes from one numpy Generator seeded at construction, so two
    engines created with the same seed and configuration evolve identically.

    Subclasses can override:
    - _report_progress(): Report after each generation (default: log statistics)
    - _final_report():    Report at the end of the run (default: log the best genome)

    Parallelization of fitness evaluation:
        num_jobs=None: One worker per genome
        num_jobs=1:    Serial evaluation (no parallelization)
        num_jobs>1:    Use specified number of workers
        num_jobs=-1:   Use all available CPU cores
    Workers are threads or processes according to 'config.prefer'. With processes,
    the evaluation function must be picklable.

    Public Methods:
        run(num_jobs):      Execute a complete run, return the best genome
        step(num_jobs):     Execute one generation
        evaluate(num_jobs): Evaluate the fitness of every genome
        speciate():         Assign every genome to a species
        reproduce():        Replace the population with the next generation
    """

    def __init__(self,
                 config         : Config,
                 evaluation     : EvaluationFunc,
                 reproduction   : Reproduction | None = None,
                 seed           : int | None = None,
                 suppress_output: bool = False):
        """
        Initialize the engine.

        Parameters:
            config:          Configuration parameters; a private copy is kept for the run
            evaluation:      Maps a NeuralNetwork to its fitness; called once per genome per generation,
                             possibly concurrently
            reproduction:    Strategy producing offspring; defaults to MutationReproduction
            seed:            Seed for the random number generator; defaults to 'config.seed'
            suppress_output: If True, suppress progress and final reports
        """
        self._config: Config = copy.deepcopy(config)
        self._config.validate()

        self._evaluation     : EvaluationFunc = evaluation
        self._suppress_output: bool           = suppress_output
        self._rng            : np.random.Generator = np.random.default_rng(seed if seed is not None else self._config.seed)

        self._tracker      = InnovationTracker(self._config.num_inputs + self._config.num_outputs)
        self._genome_ids   = count(0)
        self._reproduction = reproduction if reproduction is not None else MutationReproduction(self._config, self._tracker)

        self._generation_counter: int           = 0
        self._best              : Genome | None = None

        self._population      = Population(self._config, self._tracker, self._rng, self._genome_ids)
        self._species_manager = SpeciesManager(self._config)

        # Seed the species list with a randomly selected genome
        genomes = self._population.genomes
        self._species_manager.create(genomes[self._rng.integers(len(genomes))])

    @property
    def config(self) -> Config:
        return self._config

    @property
    def population(self) -> list[Genome]:
        """The genomes of the current generation."""
        return self._population.genomes

    @property
    def species(self) -> list[Species]:
        """All species, in creation order."""
        return self._species_manager.species

    @property
    def best(self) -> Genome | None:
        """A snapshot of the best genome evaluated so far, or None before the first evaluation."""
        return self._best

    @property
    def generation(self) -> int:
        """The number of generations completed."""
        return self._generation_counter

    @property
    def tracker(self) -> InnovationTracker:
        return self._tracker

    def run(self, num_jobs: int | None = None) -> Genome | None:
        """
        Run the evolution for 'config.num_generations' generations.

        Every generation is evaluated and speciated; all but the last one then
        reproduce, so the final population is the last one evaluated.

        Parameters:
            num_jobs: Number of parallel workers for fitness evaluation (see class docstring);
                      defaults to 'config.num_jobs'

        Returns:
            the best genome found, or None if no generation was run
        """
        logger.info("Starting evolution: %d generations, population of %d",
                    self._config.num_generations, self._config.population_size)

        for gen in range(self._config.num_generations):
            self.step(num_jobs, reproduce=gen < self._config.num_generations - 1)

        if not self._suppress_output:
            self._final_report()

        return self._best

    def step(self, num_jobs: int | None = None, reproduce: bool = True) -> None:
        """
        Run one generation: evaluate, speciate and (optionally) reproduce.
        """
        self.evaluate(num_jobs)
        self.speciate()
        self._generation_counter += 1

        if not self._suppress_output:
            self._report_progress()

        if reproduce:
            self.reproduce()

    def evaluate(self, num_jobs: int | None = None) -> None:
        """
        Evaluate the fitness of every genome in the population.

        Each genome is decoded into a network and passed to the evaluation function;
        the result is stored as the genome's fitness. Evaluations are independent of
        each other; all of them complete before this method returns.

        Parameters:
            num_jobs: Number of parallel workers; defaults to 'config.num_jobs',
                      and to one worker per genome if that is None as well
        """
        genomes = self._population.genomes
        if num_jobs is None:
            num_jobs = self._config.num_jobs
        if num_jobs is None:
            num_jobs = max(1, len(genomes))

        if num_jobs == 1:
            for genome in genomes:
                genome.evaluate(self._evaluation)
        else:
            fitness_all = Parallel(n_jobs=num_jobs, prefer=self._config.prefer)(
                delayed(_evaluate_genome)(genome, self._evaluation) for genome in genomes)
            for genome, fitness in zip(genomes, fitness_all):
                genome.fitness = fitness

        fittest = self._population.get_fittest_genome(self._config.minimize_fitness)
        if fittest is not None and (self._best is None or self._is_better(fittest.fitness, self._best.fitness)):
            self._best = fittest.copy(fittest.id)

    def speciate(self) -> None:
        """
        Assign every genome of the population to a species (first match in creation order).
        """
        self._species_manager.speciate(self._population.genomes)

    def reproduce(self) -> None:
        """
        Replace the population with the offspring of the species' survivors.
        """
        self._population.spawn_next_generation(self._species_manager.species, self._reproduction, self._rng)

    def _is_better(self, fitness: float, reference: float) -> bool:
        if self._config.minimize_fitness:
            return fitness < reference
        return fitness > reference

    def _report_progress(self) -> None:
        """
        Report progress after each generation.

        Subclasses can override this to print, plot or checkpoint. Suppressed
        by setting 'suppress_output' to True.
        """
        fitness_all = [genome.fitness for genome in self._population.genomes]
        logger.info("Generation %d: best fitness %.6f, mean fitness %.6f, %d active species (%d total)",
                    self._generation_counter,
                    self._population.get_fittest_genome(self._config.minimize_fitness).fitness,
                    mean(fitness_all),
                    len(self._species_manager.active_species),
                    len(self._species_manager.species))

    def _final_report(self) -> None:
        """
        Report at the end of the run. Suppressed by setting 'suppress_output' to True.
        """
        if self._best is None:
            logger.info("Evolution finished without evaluating any genome")
        else:
            logger.info("Evolution finished after %d generations, best genome %d with fitness %.6f",
                        self._generation_counter, self._best.id, self._best.fitness)
