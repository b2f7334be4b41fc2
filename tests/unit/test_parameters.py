from tests import TstSigning


class TestParameterSet(TstSigning):
    def test_lookup_is_case_insensitive(self):
        from ph_common.parameters import ParameterSet

        parameters = ParameterSet({'Sph-Account': 'test'})

        self.assertEqual('test', parameters['sph-account'])
        self.assertEqual('test', parameters['SPH-ACCOUNT'])
        self.assertEqual('test', parameters.get('sPh-AcCoUnT'))
        self.assertIn('SPH-account', parameters)

    def test_names_keep_their_case(self):
        from ph_common.parameters import ParameterSet

        parameters = ParameterSet([('Sph-Account', 'test'), ('language', 'EN')])

        self.assertEqual(['Sph-Account', 'language'], list(parameters))
        self.assertEqual([('Sph-Account', 'test'), ('language', 'EN')], parameters.to_list())

    def test_later_write_overwrites(self):
        from ph_common.parameters import ParameterSet

        parameters = ParameterSet({'sph-account': 'first'})
        parameters['SPH-ACCOUNT'] = 'second'

        self.assertEqual(1, len(parameters))
        self.assertEqual([('SPH-ACCOUNT', 'second')], parameters.to_list())

    def test_enum_names_are_stored_as_plain_strings(self):
        from ph_common.field_enum import SphField
        from ph_common.parameters import ParameterSet

        parameters = ParameterSet({SphField.ACCOUNT: 'test'})

        self.assertIs(str, type(next(iter(parameters))))
        self.assertEqual('test', parameters['sph-account'])

    def test_pop_and_delete(self):
        from ph_common.parameters import ParameterSet

        parameters = ParameterSet({'Signature': 'SPH1 a b', 'sph-account': 'test'})

        self.assertEqual('SPH1 a b', parameters.pop('signature'))
        self.assertIsNone(parameters.pop('signature', None))
        del parameters['SPH-ACCOUNT']

        self.assertEqual([], parameters.to_list())
        with self.assertRaises(KeyError):
            parameters.pop('missing')

    def test_copy_is_independent(self):
        from ph_common.parameters import ParameterSet

        parameters = ParameterSet({'Sph-Account': 'test'})
        copied = parameters.copy()
        copied['sph-account'] = 'other'

        self.assertEqual('test', parameters['sph-account'])
        self.assertEqual([('sph-account', 'other')], copied.to_list())

    def test_null_values_are_held_until_signing(self):
        from ph_common.parameters import ParameterSet

        parameters = ParameterSet({'sph-order': None})

        self.assertIn('sph-order', parameters)
        self.assertIsNone(parameters['sph-order'])
