
"""Process-wide configuration for uninames.

Values come from, in increasing precedence: registered defaults, an optional config file
(plain python source, whose globals become config keys), registered environment variables,
and keyword args to load().
"""

import os
from collections import namedtuple


Registration = namedtuple('Registration', ['env_vars', 'map_fn'])


class Config(dict):
	"""A dict of config values, which can also be read as attributes.
	Reading a missing key as an attribute gives None rather than raising.
	All load and from_* methods update the existing values, so order matters.
	"""

	def __init__(self, *args, **kwargs):
		super(Config, self).__init__(*args, **kwargs)
		self.registered = {}

	def __getattr__(self, name):
		if name in self:
			return self[name]
		return None

	def register(self, name, env_vars=[], default=None, map_fn=None):
		"""Declare a config option.
			env_vars: Environment vars it may be set from, most preferred first.
			default: Value to take if nothing else sets it (None for no default).
			map_fn: Converts values read from the environment, eg. int.
		Registering a name again replaces its env_vars and map_fn but keeps its value.
		"""
		self.registered[name] = Registration(list(env_vars), map_fn)
		if default is not None:
			self.setdefault(name, default)

	def load(self, conf_file=None, env=None, user_config=False, **kwargs):
		"""Populate the config from, in order:
			conf_file: A path or list of paths, see from_file().
			env: An environment dict, or os.environ if True. See from_env().
			Any extra kwargs, which are set as is.
		If user_config is true, setting the conf_file option from the environment
		loads that file at the point it is set.
		"""
		if user_config:
			def map_fn(path):
				self.from_file(path)
				return path
			existing = self.registered.get('conf_file')
			self.register('conf_file', env_vars=existing.env_vars if existing else ['CONF_FILE'], map_fn=map_fn)

		if conf_file:
			if isinstance(conf_file, str):
				conf_file = conf_file,
			self.from_file(*conf_file)

		if env:
			self.from_env(None if env is True else env)

		self.update(kwargs)

	def from_file(self, *conf_files):
		"""Execute each python source file in turn with this config as its globals,
		so that eg. a line "data_dir = '/srv/names'" sets the data_dir option.
		The name "config" refers to this object within the file.
		User expansion is performed on the paths, and errors in the files are raised.
		"""
		for conf_file in conf_files:
			path = os.path.expanduser(conf_file)
			with open(path) as f:
				code = compile(f.read(), path, 'exec')
			namespace = {'config': self}
			namespace.update(self)
			exec(code, namespace)
			self.update({
				key: value for key, value in namespace.items()
				if key not in ('config', '__builtins__')
			})

	def from_env(self, env=None):
		"""Set registered options from the given environment dict (default os.environ).
		Unregistered variables are ignored."""
		if env is None:
			env = os.environ

		for name, reg in list(self.registered.items()):
			for var in reg.env_vars:
				if var in env:
					self[name] = self.apply_map(name, env[var])
					break

	def get_registered(self):
		"""Returns a dict of only the registered options that have values"""
		return {name: self[name] for name in self.registered if name in self}

	def apply_map(self, name, value):
		"""Helper function that applies the map_fn for name (if any) to value."""
		reg = self.registered.get(name)
		if reg and reg.map_fn:
			return reg.map_fn(value)
		return value


# The configuration used by uninames.default_map()
CONF = Config()
