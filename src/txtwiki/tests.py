##############################################################################
#
# Copyright Zope Corporation and Contributors.
# All Rights Reserved.
#
# This software is subject to the provisions of the Zope Public License,
# Version 2.1 (ZPL).  A copy of the ZPL should accompany this distribution.
# THIS SOFTWARE IS PROVIDED "AS IS" AND ANY AND ALL EXPRESS OR IMPLIED
# WARRANTIES ARE DISCLAIMED, INCLUDING, BUT NOT LIMITED TO, THE IMPLIED
# WARRANTIES OF TITLE, MERCHANTABILITY, AGAINST INFRINGEMENT, AND FITNESS
# FOR A PARTICULAR PURPOSE.
#
##############################################################################

from zope.testing import setupstack
import doctest
import os
import txtwiki
import unittest


class TitleTests(unittest.TestCase):

    def test_valid_titles(self):
        for title in ('a', 'Z', '0', 'FrontPage', 'abc123XYZ', '2024'):
            for verb in ('view', 'edit', 'save'):
                self.assertEqual(
                    txtwiki.extract_title('/%s/%s' % (verb, title)), title)

    def test_invalid_paths(self):
        for path in ('', '/', '/view', '/view/', '/view/../etc',
                     '/view/ab c', '/view/bad.title', '/view/a-b',
                     '/view/abc/', '/view/abc\n', '/view/caf\xe9',
                     '/delete/abc', '/View/abc', 'view/abc', '//view/abc',
                     '/view/abc/def', '/viewer/abc'):
            with self.assertRaises(txtwiki.InvalidPath) as context:
                txtwiki.extract_title(path)
            self.assertEqual(context.exception.path, path)

    def test_message(self):
        with self.assertRaises(txtwiki.InvalidPath) as context:
            txtwiki.extract_title('/view/a.b')
        self.assertEqual(str(context.exception),
                         "Invalid page path: '/view/a.b'")


class PageStoreTests(unittest.TestCase):

    def setUp(self):
        setupstack.setUpDirectory(self)
        self.store = txtwiki.PageStore('pages')

    def tearDown(self):
        setupstack.tearDown(self)

    def test_directory_is_created(self):
        self.assertTrue(os.path.isdir('pages'))
        self.assertEqual(self.store.directory, os.path.abspath('pages'))

    def test_round_trip(self):
        for body in (b'', b'bar', bytes(range(256)), b'a\r\nb\x00' * 1000):
            self.store.save(txtwiki.Page('t', body))
            page = self.store.load('t')
            self.assertEqual(page.title, 't')
            self.assertEqual(page.body, body)

    def test_file_layout(self):
        self.store.save(txtwiki.Page('Foo', b'bar'))
        self.assertEqual(os.listdir('pages'), ['Foo.txt'])
        with open(os.path.join('pages', 'Foo.txt'), 'rb') as f:
            self.assertEqual(f.read(), b'bar')
        mode = os.stat(os.path.join('pages', 'Foo.txt')).st_mode
        self.assertEqual(mode & 0o777, 0o600)

    def test_saving_twice_is_saving_once(self):
        page = txtwiki.Page('Foo', b'same')
        self.store.save(page)
        self.store.save(page)
        self.assertEqual(os.listdir('pages'), ['Foo.txt'])
        self.assertEqual(self.store.load('Foo').body, b'same')

    def test_overwrite_truncates(self):
        self.store.save(txtwiki.Page('Foo', b'a long first version'))
        self.store.save(txtwiki.Page('Foo', b'short'))
        self.assertEqual(self.store.load('Foo').body, b'short')

    def test_load_missing(self):
        with self.assertRaises(txtwiki.PageNotFound) as context:
            self.store.load('Missing')
        self.assertEqual(context.exception.title, 'Missing')
        self.assertTrue(str(context.exception).startswith('Missing: '))

    def test_save_failure(self):
        os.mkdir(os.path.join('pages', 'Foo.txt'))
        with self.assertRaises(txtwiki.PersistenceFailure) as context:
            self.store.save(txtwiki.Page('Foo', b'bar'))
        self.assertIsInstance(context.exception.error, OSError)
        self.assertEqual(str(context.exception), str(context.exception.error))


class PageTests(unittest.TestCase):

    def test_defaults_to_empty(self):
        page = txtwiki.Page('NewPage')
        self.assertEqual(page.body, b'')
        self.assertEqual(page.text, '')

    def test_text(self):
        self.assertEqual(txtwiki.Page('t', b'caf\xc3\xa9').text, 'caf\xe9')
        self.assertEqual(txtwiki.Page('t', b'\xff').text, '\ufffd')

    def test_repr(self):
        self.assertEqual(repr(txtwiki.Page('Foo', b'bar')),
                         "<Page 'Foo' (3 bytes)>")


class RoutingTests(unittest.TestCase):

    def setUp(self):
        setupstack.setUpDirectory(self)

    def tearDown(self):
        setupstack.tearDown(self)

    def test_resources_in_route_order(self):
        application = txtwiki.Application(directory='pages')
        self.assertEqual(
            [resource.im_func.bobo_route
             for resource in application.wiki.resources()],
            ['/view/:title', '/edit/:title', '/save/:title'])

    def test_missing_parent_directory(self):
        with self.assertRaises(txtwiki.StartupFailure):
            txtwiki.Application(directory=os.path.join('missing', 'pages'))
        self.assertFalse(os.path.exists('missing'))


def test_suite():
    options = doctest.ELLIPSIS | doctest.NORMALIZE_WHITESPACE
    loader = unittest.defaultTestLoader
    return unittest.TestSuite((
        loader.loadTestsFromTestCase(TitleTests),
        loader.loadTestsFromTestCase(PageStoreTests),
        loader.loadTestsFromTestCase(PageTests),
        loader.loadTestsFromTestCase(RoutingTests),
        doctest.DocFileSuite('wiki.test', 'server.test', optionflags=options),
        ))

def load_tests(loader, tests, pattern):
    return test_suite()
