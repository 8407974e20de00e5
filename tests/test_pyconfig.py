import os
import shutil
import tempfile
from unittest import TestCase, main

from pyconfig import Config


class ConfigTests(TestCase):

	def setUp(self):
		self.tmpdir = tempfile.mkdtemp()
		self.conf = Config()
		self.conf.register('data_dir', env_vars=['MY_DATA_DIR', 'OLD_DATA_DIR'], default='/default')
		self.conf.register('chunk_size', env_vars=['MY_CHUNK_SIZE'], default=4096, map_fn=int)

	def tearDown(self):
		shutil.rmtree(self.tmpdir)

	def write(self, name, content):
		path = os.path.join(self.tmpdir, name)
		with open(path, 'w') as f:
			f.write(content)
		return path

	def test_defaults(self):
		self.assertEqual(self.conf.data_dir, '/default')
		self.assertEqual(self.conf['chunk_size'], 4096)
		self.assertIsNone(self.conf.missing)

	def test_from_env(self):
		self.conf.from_env({'MY_CHUNK_SIZE': '512', 'OLD_DATA_DIR': '/old', 'UNRELATED': 'x'})
		self.assertEqual(self.conf.chunk_size, 512)
		self.assertEqual(self.conf.data_dir, '/old')
		self.assertNotIn('UNRELATED', self.conf)

	def test_env_precedence(self):
		self.conf.from_env({'MY_DATA_DIR': '/new', 'OLD_DATA_DIR': '/old'})
		self.assertEqual(self.conf.data_dir, '/new')

	def test_from_file(self):
		path = self.write('conf.py', "data_dir = '/from/file'\nchunk_size = 2 * 512\n")
		self.conf.from_file(path)
		self.assertEqual(self.conf.data_dir, '/from/file')
		self.assertEqual(self.conf.chunk_size, 1024)
		self.assertEqual(self.conf.get_registered(), {'data_dir': '/from/file', 'chunk_size': 1024})
		self.assertNotIn('config', self.conf)

	def test_load_order(self):
		path = self.write('conf.py', "data_dir = '/from/file'\nchunk_size = 1024\n")
		self.conf.load(conf_file=path, env={'MY_CHUNK_SIZE': '2048'}, data_dir='/from/kwargs')
		self.assertEqual(self.conf.chunk_size, 2048)
		self.assertEqual(self.conf.data_dir, '/from/kwargs')

	def test_user_config(self):
		path = self.write('conf.py', "data_dir = '/from/file'\n")
		self.conf.load(env={'CONF_FILE': path}, user_config=True)
		self.assertEqual(self.conf.data_dir, '/from/file')
		self.assertEqual(self.conf.conf_file, path)


if __name__ == '__main__':
	main()
