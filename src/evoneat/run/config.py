import configparser
import json
import os

from evoneat.activations import activations

class ConfigError(Exception):
    """
    Raised when a configuration cannot be loaded: the file is missing or cannot
    be parsed, a required option is absent, or a value is malformed or out of range.
    """
    pass

class Config:
    """
    Hyperparameter settings for one evolutionary run.

    A Config is either read from an INI file (the native format), read from a JSON
    file using camelCase keys (see 'from_json'), or created empty with defaults and
    filled in by hand (useful for tests).

    The Evolution engine takes a private copy of the Config it is given, so the
    settings stay fixed for the whole run.
    """

    # JSON key => attribute name
    _JSON_KEYS = {
        'numInputs'        : 'num_inputs',
        'numOutputs'       : 'num_outputs',
        'numGenerations'   : 'num_generations',
        'populationSize'   : 'population_size',
        'initFitness'      : 'init_fitness',
        'minimizeFitness'  : 'minimize_fitness',
        'survivalCutoff'   : 'survival_rate',
        'ratePerturb'      : 'rate_perturb',
        'rateAddNode'      : 'rate_add_node',
        'rateAddConn'      : 'rate_add_conn',
        'distanceThreshold': 'distance_threshold',
        'coeffUnmatching'  : 'coeff_unmatching',
        'coeffMatching'    : 'coeff_matching',
    }

    def __init__(self, config_file: str | None = None):
        """
        Initialize Config by parsing an INI file, or create a Config holding defaults.

        Parameters:
            config_file: Path to the INI configuration file.
                         If None, creates a Config with default values for manual attribute setting.

        Raises:
            ConfigError: if the file is missing, cannot be parsed, lacks a required
                         option, or holds an invalid value
        """
        self._set_defaults()
        if config_file is None:
            return

        if not os.path.exists(config_file):
            raise ConfigError(f"Configuration file '{config_file}' not found")

        parser = configparser.ConfigParser()
        try:
            parser.read(config_file)
        except configparser.Error as e:
            raise ConfigError(f"Cannot parse configuration file '{config_file}'") from e

        # Sentinel for missing default values
        _NO_DEFAULT = object()

        # Helper function to safely parse values
        def get_value(section, key, value_type, default=_NO_DEFAULT):
            try:
                raw_value = parser.get(section, key)
                if raw_value.lower() == 'none':
                    return None
                if value_type == int:
                    return parser.getint(section, key)
                elif value_type == float:
                    return parser.getfloat(section, key)
                elif value_type == bool:
                    return parser.getboolean(section, key)
                elif value_type == str:
                    return raw_value
            except (configparser.NoSectionError, configparser.NoOptionError) as e:
                if default is not _NO_DEFAULT:
                    return default
                raise ConfigError(f"Missing option '{key}' in section [{section}] of '{config_file}'") from e
            except ValueError as e:
                raise ConfigError(f"Bad value for option '{key}' in section [{section}] of '{config_file}'") from e

        # [NETWORK]

        # The number of input nodes, through which the network receives inputs.
        self.num_inputs = get_value('NETWORK', 'num_inputs', int)

        # The number of output nodes, to which the network delivers outputs.
        self.num_outputs = get_value('NETWORK', 'num_outputs', int)

        # Activation function of the output nodes, and of the hidden nodes
        # created by mutation. See the 'activations' module for the choices.
        self.output_activation = get_value('NETWORK', 'output_activation', str, default='sigmoid')
        self.hidden_activation = get_value('NETWORK', 'hidden_activation', str, default='sigmoid')

        # [EVOLUTION]

        # The number of generations to run.
        self.num_generations = get_value('EVOLUTION', 'num_generations', int)

        # The number of genomes in each generation.
        self.population_size = get_value('EVOLUTION', 'population_size', int)

        # The fitness assigned to a genome before it is first evaluated.
        self.init_fitness = get_value('EVOLUTION', 'init_fitness', float)

        # Whether lower fitness values are better.
        self.minimize_fitness = get_value('EVOLUTION', 'minimize_fitness', bool)

        # The fraction of each species that survives and reproduces.
        self.survival_rate = get_value('EVOLUTION', 'survival_rate', float)

        # Seed for the random number generator; "None" draws fresh entropy.
        self.seed = get_value('EVOLUTION', 'seed', int, default=None)

        # [MUTATION]

        # The probability that a connection weight is perturbed.
        self.rate_perturb = get_value('MUTATION', 'rate_perturb', float)

        # The probability that a connection is split by adding a new node.
        self.rate_add_node = get_value('MUTATION', 'rate_add_node', float)

        # The probability that a new connection is added.
        self.rate_add_conn = get_value('MUTATION', 'rate_add_conn', float)

        # The standard deviation of the zero-centered normal distribution
        # from which a weight perturbation is drawn.
        self.weight_perturb_strength = get_value('MUTATION', 'weight_perturb_strength', float, default=0.5)

        # The standard deviation of the zero-centered normal distribution
        # used to initialize the weights of the initial connections.
        self.weight_init_stdev = get_value('MUTATION', 'weight_init_stdev', float, default=1.0)

        # [SPECIATION]

        # Genomes whose compatibility distance to a species representative
        # is less than this threshold belong to that species.
        self.distance_threshold = get_value('SPECIATION', 'distance_threshold', float)

        # The coefficient for the unmatching connection genes'
        # contribution to the compatibility distance.
        self.coeff_unmatching = get_value('SPECIATION', 'coeff_unmatching', float)

        # The coefficient for the weight difference of matching
        # connection genes' contribution to the compatibility distance.
        self.coeff_matching = get_value('SPECIATION', 'coeff_matching', float)

        # [PARALLEL]

        # Number of workers evaluating fitness; "None" gives one worker per genome.
        self.num_jobs = get_value('PARALLEL', 'num_jobs', int, default=None)

        # Whether fitness evaluation runs on "threads" or "processes".
        self.prefer = get_value('PARALLEL', 'prefer', str, default='threads')

        self.validate()

    def _set_defaults(self):
        self.num_inputs        = 2
        self.num_outputs       = 1
        self.output_activation = 'sigmoid'
        self.hidden_activation = 'sigmoid'

        self.num_generations  = 100
        self.population_size  = 150
        self.init_fitness     = 0.0
        self.minimize_fitness = False
        self.survival_rate    = 0.5
        self.seed             = None

        self.rate_perturb            = 0.8
        self.rate_add_node           = 0.03
        self.rate_add_conn           = 0.05
        self.weight_perturb_strength = 0.5
        self.weight_init_stdev       = 1.0

        self.distance_threshold = 3.0
        self.coeff_unmatching   = 1.0
        self.coeff_matching     = 0.4

        self.num_jobs = None
        self.prefer   = 'threads'

    @classmethod
    def from_json(cls, config_file: str) -> 'Config':
        """
        Create a Config from a JSON file with camelCase keys, e.g.:
            {"numInputs": 3, "numOutputs": 1, "numGenerations": 50,
             "populationSize": 50, "initFitness": 9999.0, "minimizeFitness": true,
             "survivalCutoff": 0.4, "ratePerturb": 0.2, "rateAddNode": 0.2,
             "rateAddConn": 0.2, "distanceThreshold": 0.5,
             "coeffUnmatching": 1.0, "coeffMatching": 1.0}
        Keys that are absent keep their default values.

        Raises:
            ConfigError: if the file is missing, is not valid JSON, or holds an invalid value
        """
        try:
            with open(config_file, encoding='utf-8') as f:
                data = json.load(f)
        except FileNotFoundError as e:
            raise ConfigError(f"Configuration file '{config_file}' not found") from e
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigError(f"Cannot parse configuration file '{config_file}'") from e

        if not isinstance(data, dict):
            raise ConfigError(f"Configuration file '{config_file}' must hold a JSON object")

        config = cls()
        for key, value in data.items():
            if key in cls._JSON_KEYS:
                setattr(config, cls._JSON_KEYS[key], value)
        config.validate()
        return config

    def validate(self) -> None:
        """
        Check that all settings are within their allowed ranges.

        Raises:
            ConfigError: if a setting is out of range
        """
        def require(condition, message):
            if not condition:
                raise ConfigError(message)

        try:
            self._check_ranges(require)
        except TypeError as e:
            raise ConfigError(f"Configuration holds a value of the wrong type: {e}") from e

    def _check_ranges(self, require) -> None:
        require(isinstance(self.num_inputs, int) and self.num_inputs >= 0,
                f"num_inputs must be a non-negative integer, got {self.num_inputs!r}")
        require(isinstance(self.num_outputs, int) and self.num_outputs >= 0,
                f"num_outputs must be a non-negative integer, got {self.num_outputs!r}")
        require(isinstance(self.num_generations, int) and self.num_generations >= 0,
                f"num_generations must be a non-negative integer, got {self.num_generations!r}")
        require(isinstance(self.population_size, int) and self.population_size > 0,
                f"population_size must be a positive integer, got {self.population_size!r}")
        require(0.0 < self.survival_rate <= 1.0,
                f"survival_rate must be in (0, 1], got {self.survival_rate!r}")
        for name in ('rate_perturb', 'rate_add_node', 'rate_add_conn'):
            value = getattr(self, name)
            require(0.0 <= value <= 1.0, f"{name} must be in [0, 1], got {value!r}")
        for name in ('distance_threshold', 'coeff_unmatching', 'coeff_matching',
                     'weight_perturb_strength', 'weight_init_stdev'):
            value = getattr(self, name)
            require(value >= 0.0, f"{name} must be non-negative, got {value!r}")
        require(self.output_activation in activations,
                f"unknown output_activation '{self.output_activation}'")
        require(self.hidden_activation in activations,
                f"unknown hidden_activation '{self.hidden_activation}'")
        require(self.num_jobs is None or self.num_jobs != 0,
                "num_jobs must be None or a non-zero integer")
        require(self.prefer in ('threads', 'processes'),
                f"prefer must be 'threads' or 'processes', got {self.prefer!r}")

    def summary(self) -> str:
        """
        Return a human-readable table of the settings.
        """
        rule = "-" * 50
        rows = [
            ("Neural network settings", None),
            ("Number of inputs",                  f"{self.num_inputs:d}"),
            ("Number of outputs",                 f"{self.num_outputs:d}"),
            ("Evolution settings", None),
            ("Number of generations",             f"{self.num_generations:d}"),
            ("Population size",                   f"{self.population_size:d}"),
            ("Initial fitness score",             f"{self.init_fitness:.3f}"),
            ("Fitness is being minimized",        f"{self.minimize_fitness}"),
            ("Rate of survival each generation",  f"{self.survival_rate:.3f}"),
            ("Mutation settings", None),
            ("Rate of perturbation of weights",   f"{self.rate_perturb:.3f}"),
            ("Rate of adding a node",             f"{self.rate_add_node:.3f}"),
            ("Rate of adding a connection",       f"{self.rate_add_conn:.3f}"),
            ("Compatibility distance settings", None),
            ("Distance threshold",                f"{self.distance_threshold:.3f}"),
            ("Unmatching connection genes",       f"{self.coeff_unmatching:.3f}"),
            ("Matching connection genes",         f"{self.coeff_matching:.3f}"),
        ]

        lines = ["=" * 50, "Summary of NEAT hyperparameter configuration", "=" * 50]
        for label, value in rows:
            if value is None:
                lines += [rule, label, rule]
            else:
                lines.append(f"+ {label:<38s}{value}")
        lines.append(rule)
        return "\n".join(lines)

    def __str__(self):
        return self.summary()
